import re
from datetime import timedelta

from flask import current_app
from flask_jwt_extended import create_access_token

from uems.exceptions import AuthenticationError, MissingFieldsError, ValidationError
from uems.models import User
from uems.models.enums import Gender, UserRole
from uems.repositories import UserRepository

REQUIRED_SIGNUP_FIELDS = ["student_id", "email", "password", "first_name", "last_name"]
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6


def _require_strings(data: dict, fields):
    for field in fields:
        if data.get(field) is not None and not isinstance(data[field], str):
            raise ValidationError(f"{field} must be a string")


def _issue_token(user: User) -> str:
    # Flask-JWT-Extended requires a string subject
    return create_access_token(
        identity=str(user.id),
        expires_delta=timedelta(days=current_app.config["JWT_ACCESS_TOKEN_DAYS"]),
    )


class UserService:
    @staticmethod
    def sign_up(user_data: dict):
        missing = [f for f in REQUIRED_SIGNUP_FIELDS if not user_data.get(f)]
        if missing:
            raise MissingFieldsError(missing)
        _require_strings(user_data, REQUIRED_SIGNUP_FIELDS + ["gender"])

        student_id = user_data["student_id"].strip().upper()
        email = user_data["email"].strip().lower()
        if not EMAIL_PATTERN.match(email):
            raise ValidationError("Please provide a valid email")
        if len(user_data["password"]) < MIN_PASSWORD_LENGTH:
            raise ValidationError("Password must be at least 6 characters")

        gender = Gender.PREFER_NOT_TO_SAY
        if user_data.get("gender"):
            try:
                gender = Gender(user_data["gender"].lower())
            except ValueError:
                raise ValidationError(f"Invalid gender value: {user_data['gender']}")

        if UserRepository.find_by_student_id_or_email(student_id, email):
            current_app.logger.warning(f"Signup attempt with existing account: {student_id}")
            raise ValidationError("User with this student ID or email already exists")

        user = User(
            student_id=student_id,
            email=email,
            first_name=user_data["first_name"].strip(),
            last_name=user_data["last_name"].strip(),
            gender=gender,
            role=UserRole.STUDENT,
        )
        user.set_password(user_data["password"])
        created_user = UserRepository.sign_up(user)

        current_app.logger.info(f"User created successfully: {created_user.student_id}")
        return {"token": _issue_token(created_user), "user": created_user.to_dict()}

    @staticmethod
    def sign_in(student_id, password):
        if not student_id or not password:
            raise MissingFieldsError(
                [f for f, v in (("student_id", student_id), ("password", password)) if not v]
            )
        _require_strings(
            {"student_id": student_id, "password": password}, ["student_id", "password"]
        )

        user = UserRepository.find_by_student_id(student_id)
        if not user or not user.check_password(password):
            current_app.logger.warning(f"Failed login attempt for student: {student_id}")
            raise AuthenticationError("Invalid credentials")
        if not user.is_active:
            raise AuthenticationError("Account is deactivated")

        current_app.logger.info(f"User logged in successfully: {user.student_id}")
        return {"token": _issue_token(user), "user": user.to_dict()}
