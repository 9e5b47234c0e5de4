from sqlalchemy.orm import Session
from app.data.models.user import UserModel
from app.domain.errors import NotFound
from app.repos.user_repo import UserRepo
from app.domain.schemas import UserCreate, UserRead


class UserService:
    """
    Minimalny rekord uzytkownika - tozsamosc jest zewnetrzna, tu trzymamy
    tylko dane kontaktowe do snapshotu w zamowieniu.
    """

    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def upsert_user(self, payload: UserCreate) -> UserRead:
        user = self.repo.get_user(payload.id) or UserModel(id=payload.id)
        user.name = payload.name
        user.email = payload.email
        user.phone = payload.phone

        saved = self.repo.save(user)
        return UserRead.model_validate(saved)

    def get_user(self, user_id: int) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFound("User not found", user_id=user_id)
        return UserRead.model_validate(user)
