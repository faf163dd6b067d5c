from pydantic import BaseModel


class User(BaseModel):
    """The user acting on a dataset."""

    id: str | None = None
    email: str
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
