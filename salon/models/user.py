from sqlmodel import Field, SQLModel

ROLE_CLIENT = "client"
ROLE_PROFESSIONAL = "professional"


class UserBase(SQLModel):
    email: str = Field(unique=True, index=True)
    full_name: str | None = None
    phone: str | None = None
    role: str = ROLE_CLIENT


class User(UserBase, table=True):
    __tablename__ = "users"
    id: int | None = Field(default=None, primary_key=True)
    hashed_password: str


class UserCreate(SQLModel):
    email: str
    password: str
    full_name: str | None = None
    phone: str | None = None


class UserUpdate(SQLModel):
    full_name: str | None = None
    phone: str | None = None


class UserPublic(SQLModel):
    id: int
    email: str
    full_name: str | None = None
    phone: str | None = None
    role: str

