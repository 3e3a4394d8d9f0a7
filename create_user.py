from app import create_app
from extensions import db
from models import Role, User
from werkzeug.security import generate_password_hash


def create_user(app, email, password, role):
    with app.app_context():
        # Проверка на уникальность email
        existing_user = User.query.filter_by(email=email).first()
        if existing_user:
            print(f"⚠️  User '{email}' already exists with role '{existing_user.role}'.")
            return existing_user

        user = User(
            email=email,
            password_hash=generate_password_hash(password),
            role=Role(role).value,
        )
        db.session.add(user)
        db.session.commit()
        print(f"✅ Created user: {email} (role: {role})")
        return user


if __name__ == '__main__':
    import argparse

    parser = argparse.ArgumentParser(description='Create a new user.')
    parser.add_argument('email', help='Login email')
    parser.add_argument('password', help='Password')
    parser.add_argument('role', choices=[r.value for r in Role], help='User role')

    args = parser.parse_args()
    create_user(create_app(), args.email, args.password, args.role)
