"""
Create a user (e.g. first admin). Run from project root:
  python -m crudkit.scripts.create_user FIRST_NAME LAST_NAME EMAIL PASSWORD
Example:
  python -m crudkit.scripts.create_user Grace Hopper grace@example.com your-secure-password
"""
import argparse
import sys

from dotenv import load_dotenv
from pydantic import ValidationError as SchemaValidationError

from crudkit.core.config import get_settings
from crudkit.core.errors import ApiError, collect_validation_messages
from crudkit.core.logs import configure_logging
from crudkit.repositories import build_user_repository
from crudkit.schemas.user import CreateUserRequest
from crudkit.services.users import build_new_user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a crudkit user.")
    parser.add_argument("first_name", help="First name (3-100 chars)")
    parser.add_argument("last_name", help="Last name (3-100 chars)")
    parser.add_argument("email", help="Unique email address")
    parser.add_argument("password", help="Password (6-128 chars)")
    args = parser.parse_args(argv)

    try:
        body = CreateUserRequest(
            first_name=args.first_name,
            last_name=args.last_name,
            email=args.email,
            password=args.password,
        )
    except SchemaValidationError as e:
        for message in collect_validation_messages(e.errors()):
            print(message, file=sys.stderr)
        return 1

    load_dotenv()
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    repository = build_user_repository(settings)
    try:
        user = repository.create(
            build_new_user(body.first_name, body.last_name, body.email, body.password)
        )
    except ApiError as e:
        for message in e.messages:
            print(message, file=sys.stderr)
        return 1
    finally:
        repository.close()
    print(f"Created user '{user.email}' with id {user.id}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
