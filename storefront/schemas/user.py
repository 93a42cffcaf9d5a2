# storefront/schemas/user.py
from sqlmodel import SQLModel


class AuthUser(SQLModel):
    """
    Identity of the signed-in user as seen by the stores.

    id: Supabase auth.users.id (JWT "sub")
    """

    id: str
    email: str | None = None
