import os

from uems import create_app
from uems.models import User
from uems.extensions import db
from uems.models.enums import Gender, UserRole

ADMIN_STUDENT_ID = os.getenv("ADMIN_STUDENT_ID", "ADMIN001")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@university.edu")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")


def create_admin_user(update=False):
    app = create_app()
    with app.app_context():
        # Check if admin already exists
        admin = User.query.filter_by(student_id=ADMIN_STUDENT_ID).first()
        if not admin:
            admin = User(
                student_id=ADMIN_STUDENT_ID,
                email=ADMIN_EMAIL,
                role=UserRole.ADMIN,
                first_name="Admin",
                last_name="User",
                gender=Gender.PREFER_NOT_TO_SAY,
            )
            admin.set_password(ADMIN_PASSWORD)
            db.session.add(admin)
            db.session.commit()
            print("Admin user created successfully!")
        elif update:
            admin.set_password(ADMIN_PASSWORD)
            admin.role = UserRole.ADMIN
            admin.is_active = True
            db.session.commit()
            print("Admin user updated successfully!")
        else:
            print("Admin user already exists!")


if __name__ == "__main__":
    create_admin_user(update=True)
