"""
GraphQL type definitions
"""
from typing import Optional, List
from datetime import datetime
import strawberry
from strawberry.scalars import JSON


@strawberry.type
class User:
    id: str
    username: str
    role: str
    name: Optional[str] = None


@strawberry.type
class UserToken:
    token: str
    user: Optional[User] = None


@strawberry.type
class Mint:
    id: str
    address: str
    cluster_id: str
    decimals: int
    name: str
    symbol: str
    logo_url: Optional[str] = None
    coin_gecko_id: Optional[str] = None
    default: bool = False
    order: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@strawberry.type
class Cluster:
    id: str
    name: str
    type: str
    status: str
    endpoint: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    mints: List[Mint] = strawberry.field(default_factory=list)


@strawberry.type
class AppMint:
    """A mint enabled for an app environment"""
    id: str
    add_memo: bool
    order: int
    app_env_id: str
    mint: Mint

    @strawberry.field
    def address(self) -> str:
        return self.mint.address

    @strawberry.field
    def cluster_id(self) -> str:
        return self.mint.cluster_id

    @strawberry.field
    def decimals(self) -> int:
        return self.mint.decimals

    @strawberry.field
    def name(self) -> str:
        return self.mint.name

    @strawberry.field
    def symbol(self) -> str:
        return self.mint.symbol


@strawberry.type
class AppUser:
    id: str
    role: str
    user: User


@strawberry.type
class App:
    id: str
    index: int
    name: str
    webhook_accept_incoming: bool = False
    webhook_event_enabled: bool = False
    webhook_event_url: Optional[str] = None
    webhook_secret: Optional[str] = None
    webhook_verify_enabled: bool = False
    webhook_verify_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    envs: List["AppEnv"] = strawberry.field(default_factory=list)
    users: List[AppUser] = strawberry.field(default_factory=list)


@strawberry.type
class AppEnv:
    id: str
    name: str
    app_id: str
    cluster_id: str
    app: Optional[App] = None
    cluster: Optional[Cluster] = None
    mints: List[AppMint] = strawberry.field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@strawberry.type
class AppTransactionError:
    id: str
    type: str
    message: Optional[str] = None
    instruction: Optional[int] = None


@strawberry.type
class AppTransaction:
    id: str
    app_env_id: str
    status: str
    amount: Optional[int] = None
    destination: Optional[str] = None
    errors: List[AppTransactionError] = strawberry.field(default_factory=list)
    fee_payer: Optional[str] = None
    mint: Optional[str] = None
    signature: Optional[str] = None
    solana_start: Optional[datetime] = None
    solana_end: Optional[datetime] = None
    solana_finalized: Optional[datetime] = None
    solana_transaction: Optional[JSON] = None
    source: Optional[str] = None
    webhook_event_start: Optional[datetime] = None
    webhook_event_end: Optional[datetime] = None
    webhook_verify_start: Optional[datetime] = None
    webhook_verify_end: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@strawberry.type
class AppTransactionStatusCount:
    status: str
    count: int


@strawberry.type
class AppEnvStats:
    """Counters derived from the transactions of an app environment"""
    transaction_count: int = 0
    transaction_status_counts: List[AppTransactionStatusCount] = strawberry.field(default_factory=list)


@strawberry.type
class PaginatedAppTransactions:
    """Paginated transactions result"""
    items: List[AppTransaction]
    total: int


# Inputs

@strawberry.input
class UserLoginInput:
    username: str
    password: str


@strawberry.input
class AdminAppCreateInput:
    index: int
    name: str


@strawberry.input
class AppUpdateInput:
    name: Optional[str] = strawberry.UNSET
    webhook_accept_incoming: Optional[bool] = strawberry.UNSET
    webhook_event_enabled: Optional[bool] = strawberry.UNSET
    webhook_event_url: Optional[str] = strawberry.UNSET
    webhook_secret: Optional[str] = strawberry.UNSET
    webhook_verify_enabled: Optional[bool] = strawberry.UNSET
    webhook_verify_url: Optional[str] = strawberry.UNSET


@strawberry.input
class UserAppEnvCreateInput:
    name: Optional[str] = strawberry.UNSET


@strawberry.input
class AdminMintCreateInput:
    address: str
    cluster_id: str
    decimals: int
    name: str
    symbol: str
    logo_url: Optional[str] = strawberry.UNSET
    coin_gecko_id: Optional[str] = strawberry.UNSET


@strawberry.input
class UserAppMintUpdateInput:
    add_memo: Optional[bool] = strawberry.UNSET
    order: Optional[int] = strawberry.UNSET


@strawberry.input
class AdminClusterUpdateInput:
    name: Optional[str] = strawberry.UNSET
    status: Optional[str] = strawberry.UNSET
    endpoint: Optional[str] = strawberry.UNSET
