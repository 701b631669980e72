"""
Main API router - GraphQL based
"""
from fastapi import APIRouter
from mogami_api.graphql_api.router import graphql_router

api_router = APIRouter()

# GraphQL endpoint
api_router.include_router(graphql_router, prefix="/graphql", tags=["graphql"])
