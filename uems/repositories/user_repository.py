from typing import Dict, Optional

from sqlalchemy import or_

from uems.extensions import db
from uems.models import User
from uems.models.enums import UserRole


class UserRepository:
    @staticmethod
    def sign_up(user: User) -> User:
        db.session.add(user)
        db.session.commit()
        return user

    @staticmethod
    def find_by_id(user_id: int) -> Optional[User]:
        return User.query.filter_by(id=user_id).first()

    @staticmethod
    def find_by_student_id(student_id: str) -> Optional[User]:
        return User.query.filter_by(student_id=student_id.strip().upper()).first()

    @staticmethod
    def find_by_student_id_or_email(student_id: str, email: str) -> Optional[User]:
        return User.query.filter(
            or_(
                User.student_id == student_id.strip().upper(),
                User.email == email.strip().lower(),
            )
        ).first()

    @staticmethod
    def promote_to_organizer(user_id: int, commit: bool = True) -> bool:
        """Students become organizers; organizers and admins keep their role."""
        updated = (
            User.query.filter(User.id == user_id, User.role == UserRole.STUDENT)
            .update({User.role: UserRole.ORGANIZER}, synchronize_session=False)
        )
        if commit:
            db.session.commit()
        return updated == 1

    @staticmethod
    def count_by_role() -> Dict[str, int]:
        rows = db.session.query(User.role, db.func.count(User.id)).group_by(User.role).all()
        return {role.value: count for role, count in rows}

    @staticmethod
    def count_active() -> int:
        return User.query.filter(User.is_active.is_(True)).count()
