from sqlmodel import Field, SQLModel


class ServiceBase(SQLModel):
    name: str = Field(unique=True, index=True)
    price: float = 0
    duration: str = ""  # free text such as "1h30min"
    category: str = "general"
    description: str | None = None
    image_url: str | None = None
    is_combo: bool = False
    is_active: bool = True
    display_order: int = 0


class Service(ServiceBase, table=True):
    __tablename__ = "services"
    id: int | None = Field(default=None, primary_key=True)


class ServiceCreate(SQLModel):
    name: str = Field(min_length=1, max_length=100)
    price: float = Field(default=0, ge=0)
    duration: str = ""
    category: str = "general"
    description: str | None = None
    image_url: str | None = None
    is_combo: bool = False
    is_active: bool = True
    display_order: int = 0


class ServiceUpdate(SQLModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    price: float | None = Field(default=None, ge=0)
    duration: str | None = None
    category: str | None = None
    description: str | None = None
    image_url: str | None = None
    is_combo: bool | None = None
    is_active: bool | None = None
    display_order: int | None = None


class ServicePublic(ServiceBase):
    id: int
    duration_minutes: int
