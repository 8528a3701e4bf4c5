import os
import sys

import django

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')
django.setup()

from django.contrib.auth import get_user_model

User = get_user_model()


def create_user(email, password, role=User.ROLE_MANAGER, assigned_shed=None):
    if User.objects.filter(email=email).exists():
        print(f"User {email} already exists")
        return None

    user = User.objects.create_user(
        email=email,
        password=password,
        role=role,
        assigned_shed=assigned_shed,
        full_name=email.split('@')[0].title(),
    )
    print(f"Created {role.lower()}: {email}")
    return user


if __name__ == "__main__":
    if len(sys.argv) < 3:
        print("Usage: python create_user.py <email> <password> [MANAGER|WORKER|SALES_REP] [shed]")
        sys.exit(1)
    create_user(*sys.argv[1:5])
