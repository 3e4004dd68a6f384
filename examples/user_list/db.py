"""In-memory seed data."""

from examples.user_list.domain import User

users: list[User] = [
    User("Ada", "ada@example.com"),
    User("Grace", "grace@example.com"),
]
