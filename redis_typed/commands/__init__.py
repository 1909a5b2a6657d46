from redis_typed.commands.base import CommandsBase
from redis_typed.commands.hashes import HashCommandsMixin
from redis_typed.commands.lists import ListCommandsMixin
from redis_typed.commands.sorted_sets import SortedSetCommandsMixin
from redis_typed.commands.strings import StringCommandsMixin


class Client(
    StringCommandsMixin,
    HashCommandsMixin,
    ListCommandsMixin,
    SortedSetCommandsMixin,
    CommandsBase,
):
    """Typed command surface over one connection.

    Combines the base with all data structure mixins. Every method returns an
    ``Operation`` that is already on its way to the server::

        async with await RedisConnection.connect("redis://localhost:6379/0") as conn:
            client = Client(conn)
            await client.set(b"greeting", b"hello")
            assert await client.get(b"greeting") == b"hello"
    """


__all__ = [
    "Client",
    "CommandsBase",
]
