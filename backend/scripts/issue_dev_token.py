import argparse

from duelytics.core.security import create_access_token


def main():
    parser = argparse.ArgumentParser(description="Mint an access token for local testing.")
    parser.add_argument("user_id")
    parser.add_argument("--username", default=None)
    parser.add_argument("--admin", action="store_true")
    parser.add_argument("--supporter", action="store_true")
    args = parser.parse_args()

    print(create_access_token(args.user_id, args.username or args.user_id, is_admin=args.admin, is_supporter=args.supporter))


if __name__ == "__main__":
    main()
