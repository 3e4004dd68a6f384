from resolvent import Context
from resolvent import schema as S

from examples.user_list.db import users
from examples.user_list.domain import User


@S.read(name="getAllUsers")
def get_all_users() -> list[User]:
    return users


@S.read(name="getOneUserByName")
def get_one_user_by_name(name: str) -> User | None:
    return next((u for u in users if u.name == name), None)


@S.write(name="addUser")
async def add_user(name: str, email: str, ctx: Context) -> User:
    user = User(name, email)
    users.append(user)
    await ctx.publish("USER_ADDED", user)
    return user


@S.event("USER_ADDED", name="userAddedNotif")
def user_added_notif(created_user: User) -> User:
    return created_user
