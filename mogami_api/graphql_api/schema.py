"""
GraphQL schema definition with queries and mutations
"""
import logging
from typing import Any, Dict, List, Optional
import strawberry
from strawberry.types import Info
from strawberry.utils.str_converters import to_camel_case
from mogami_api.core.dependencies import require_admin, require_app_access, require_app_env_access, require_user
from mogami_api.core.errors import ApiError, NotFoundError, ValidationError
from mogami_api.graphql_api.types import (
    User, UserToken, Cluster, App, AppEnv, AppMint, AppEnvStats,
    AppTransaction, PaginatedAppTransactions,
    UserLoginInput, AdminAppCreateInput, AppUpdateInput, UserAppEnvCreateInput,
    AdminMintCreateInput, UserAppMintUpdateInput, AdminClusterUpdateInput,
)
from mogami_api.graphql_api.resolvers import (
    parse_input, model_to_user, model_to_cluster, model_to_app, model_to_app_env, model_to_app_mint,
    get_cluster, get_app, get_app_env,
    resolve_clusters, resolve_apps, resolve_app_env_stats, resolve_app_transactions, resolve_app_transaction,
    login_user, create_app, update_app, create_app_env, create_mint, update_app_mint,
    add_app_env_mint, delete_app_env_mint, update_cluster,
)
from mogami_api.models.cluster import ClusterStatus
from mogami_api.models.user import User as UserModel
from mogami_api.schemas import (
    UserLogin, AppCreate, AppUpdate, AppEnvCreate, MintCreate, AppMintUpdate, ClusterUpdate,
)

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


def input_to_dict(value: Any) -> Dict[str, Any]:
    """Fields the caller actually sent (UNSET ones are dropped)"""
    if value is None:
        return {}
    return {k: v for k, v in vars(value).items() if v is not strawberry.UNSET}


def changes_from(schema, value: Any) -> Dict[str, Any]:
    """
    Validated partial update. Absent fields are skipped; null is kept for the
    schema's nullable fields and rejected for every other field.
    """
    changes = parse_input(schema, input_to_dict(value)).model_dump(exclude_unset=True)
    nullable = getattr(schema, "nullable_fields", frozenset())
    nulls = [field for field, v in changes.items() if v is None and field not in nullable]
    if nulls:
        raise ValidationError("; ".join(f"{to_camel_case(field)} must not be null" for field in nulls))
    return changes


@strawberry.type
class Query:
    """GraphQL Query type"""

    @strawberry.field
    async def me(self, info: Info) -> Optional[User]:
        """The authenticated user"""
        current_user = require_user(info.context)
        user = await info.context.db.get(UserModel, current_user["id"])
        if user is None:
            raise NotFoundError.for_entity("User", current_user["id"])
        return model_to_user(user)

    @strawberry.field
    async def user_cluster(self, info: Info, cluster_id: str) -> Optional[Cluster]:
        require_user(info.context)
        return model_to_cluster(await get_cluster(info.context.db, cluster_id))

    @strawberry.field
    async def user_clusters(self, info: Info) -> List[Cluster]:
        """Active clusters"""
        require_user(info.context)
        return await resolve_clusters(info.context.db, active_only=True)

    @strawberry.field
    async def admin_cluster(self, info: Info, cluster_id: str) -> Optional[Cluster]:
        require_admin(info.context)
        return model_to_cluster(await get_cluster(info.context.db, cluster_id))

    @strawberry.field
    async def admin_clusters(self, info: Info) -> List[Cluster]:
        """All clusters, whatever their status (admin only)"""
        require_admin(info.context)
        return await resolve_clusters(info.context.db, active_only=False)

    @strawberry.field
    async def user_apps(self, info: Info) -> List[App]:
        """Apps of the current user; admins see every app"""
        current_user = require_user(info.context)
        if current_user.get("is_admin", False):
            return await resolve_apps(info.context.db)
        return await resolve_apps(info.context.db, current_user)

    @strawberry.field
    async def admin_apps(self, info: Info) -> List[App]:
        require_admin(info.context)
        return await resolve_apps(info.context.db)

    @strawberry.field
    async def user_app(self, info: Info, app_id: str) -> Optional[App]:
        require_user(info.context)
        await require_app_access(info.context, app_id)
        app = await get_app(info.context.db, app_id)
        return model_to_app(app)

    @strawberry.field
    async def admin_app(self, info: Info, app_id: str) -> Optional[App]:
        require_admin(info.context)
        return model_to_app(await get_app(info.context.db, app_id))

    @strawberry.field
    async def user_app_env(self, info: Info, app_id: str, app_env_id: str) -> Optional[AppEnv]:
        require_user(info.context)
        await require_app_access(info.context, app_id)
        env = await get_app_env(info.context.db, app_id, app_env_id)
        return model_to_app_env(env)

    @strawberry.field
    async def user_app_env_stats(self, info: Info, app_env_id: str) -> AppEnvStats:
        """Transaction counters of an app environment, zero when it has none"""
        require_user(info.context)
        await require_app_env_access(info.context, app_env_id)
        return await resolve_app_env_stats(info.context.db, app_env_id)

    @strawberry.field
    async def user_app_transactions(
        self,
        info: Info,
        app_id: str,
        app_env_id: str,
        limit: int = MAX_PAGE_SIZE,
        offset: int = 0,
    ) -> PaginatedAppTransactions:
        require_user(info.context)
        if limit < 1 or offset < 0:
            raise ValidationError("limit must be positive and offset must not be negative")
        await require_app_access(info.context, app_id)
        env = await get_app_env(info.context.db, app_id, app_env_id)
        items, total = await resolve_app_transactions(info.context.db, env.id, min(limit, MAX_PAGE_SIZE), offset)
        return PaginatedAppTransactions(items=items, total=total)

    @strawberry.field
    async def user_app_transaction(
        self,
        info: Info,
        app_id: str,
        app_env_id: str,
        app_transaction_id: str,
    ) -> Optional[AppTransaction]:
        require_user(info.context)
        await require_app_access(info.context, app_id)
        env = await get_app_env(info.context.db, app_id, app_env_id)
        return await resolve_app_transaction(info.context.db, env.id, app_transaction_id)


@strawberry.type
class Mutation:
    """GraphQL Mutation type"""

    @strawberry.mutation
    async def login(self, info: Info, input: UserLoginInput) -> Optional[UserToken]:
        """Exchange username and password for an access token"""
        data = parse_input(UserLogin, input_to_dict(input))
        return await login_user(info.context.db, data.username, data.password)

    @strawberry.mutation
    async def admin_create_app(self, info: Info, input: AdminAppCreateInput) -> Optional[App]:
        """Create an app with its default environment (admin only)"""
        current_user = require_admin(info.context)
        data = parse_input(AppCreate, input_to_dict(input))
        app = await create_app(info.context.db, data.index, data.name, owner_id=current_user["id"])
        return model_to_app(app)

    @strawberry.mutation
    async def admin_update_app(self, info: Info, app_id: str, input: AppUpdateInput) -> Optional[App]:
        require_admin(info.context)
        changes = changes_from(AppUpdate, input)
        return model_to_app(await update_app(info.context.db, app_id, changes))

    @strawberry.mutation
    async def user_update_app(self, info: Info, app_id: str, input: AppUpdateInput) -> Optional[App]:
        require_user(info.context)
        changes = changes_from(AppUpdate, input)
        await require_app_access(info.context, app_id)
        app = await get_app(info.context.db, app_id)
        return model_to_app(await update_app(info.context.db, app.id, changes))

    @strawberry.mutation
    async def user_create_app_env(
        self,
        info: Info,
        app_id: str,
        cluster_id: str,
        input: Optional[UserAppEnvCreateInput] = None,
    ) -> Optional[AppEnv]:
        """Create an environment binding the app to a cluster"""
        require_user(info.context)
        data = parse_input(AppEnvCreate, input_to_dict(input))
        db = info.context.db
        await require_app_access(info.context, app_id)
        app = await get_app(db, app_id)
        cluster = await get_cluster(db, cluster_id)
        if cluster.status != ClusterStatus.ACTIVE:
            raise ValidationError(f"Cluster {cluster.id} is not active")
        env = await create_app_env(db, app, cluster, data.name)
        return model_to_app_env(env)

    @strawberry.mutation
    async def admin_mint_create(self, info: Info, input: AdminMintCreateInput) -> Optional[Cluster]:
        """Create a mint and return the cluster with all its mints (admin only)"""
        require_admin(info.context)
        data = parse_input(MintCreate, input_to_dict(input))
        cluster = await get_cluster(info.context.db, data.cluster_id)
        cluster = await create_mint(info.context.db, cluster, data.model_dump(exclude={"cluster_id"}))
        return model_to_cluster(cluster)

    @strawberry.mutation
    async def user_update_app_mint(
        self,
        info: Info,
        app_id: str,
        app_mint_id: str,
        input: UserAppMintUpdateInput,
    ) -> Optional[AppMint]:
        require_user(info.context)
        changes = changes_from(AppMintUpdate, input)
        await require_app_access(info.context, app_id)
        app = await get_app(info.context.db, app_id)
        app_mint = await update_app_mint(info.context.db, app.id, app_mint_id, changes)
        return model_to_app_mint(app_mint)

    @strawberry.mutation
    async def user_app_env_mint_add(self, info: Info, app_id: str, app_env_id: str, mint_id: str) -> Optional[AppEnv]:
        """Enable a mint of the environment's cluster"""
        require_user(info.context)
        await require_app_access(info.context, app_id)
        env = await get_app_env(info.context.db, app_id, app_env_id)
        return model_to_app_env(await add_app_env_mint(info.context.db, env, mint_id))

    @strawberry.mutation
    async def user_app_env_mint_delete(self, info: Info, app_id: str, app_env_id: str, app_mint_id: str) -> Optional[AppEnv]:
        require_user(info.context)
        await require_app_access(info.context, app_id)
        env = await get_app_env(info.context.db, app_id, app_env_id)
        return model_to_app_env(await delete_app_env_mint(info.context.db, env, app_mint_id))

    @strawberry.mutation
    async def admin_update_cluster(self, info: Info, cluster_id: str, input: AdminClusterUpdateInput) -> Optional[Cluster]:
        require_admin(info.context)
        changes = changes_from(ClusterUpdate, input)
        return model_to_cluster(await update_cluster(info.context.db, cluster_id, changes))


class MogamiSchema(strawberry.Schema):
    """Logs expected API errors quietly and everything else with a traceback"""

    def process_errors(self, errors, execution_context=None) -> None:
        unexpected = []
        for error in errors:
            if isinstance(error.original_error, ApiError):
                logger.info(f"{error.original_error.code}: {error.message} (path: {error.path})")
            else:
                unexpected.append(error)
        if unexpected:
            super().process_errors(unexpected, execution_context)


# Create the schema
schema = MogamiSchema(query=Query, mutation=Mutation)
