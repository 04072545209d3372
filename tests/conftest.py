import asyncio

import pytest


@pytest.fixture
async def tcp_server():
    """
    Factory for throwaway TCP listeners on 127.0.0.1

    greeting: bytes written as soon as a client connects
    reply: callable(request_bytes) -> bytes, for services that wait for the client
    silent: hold the connection open without sending anything
    """
    servers = []

    async def start(greeting=b'', reply=None, silent=False):
        async def handle(reader, writer):
            try:
                if greeting:
                    writer.write(greeting)
                    await writer.drain()
                if reply is not None:
                    request = await reader.read(1024)
                    writer.write(reply(request))
                    await writer.drain()
                if silent:
                    await reader.read()
            except ConnectionError:
                pass
            finally:
                writer.close()

        server = await asyncio.start_server(handle, '127.0.0.1', 0)
        servers.append(server)
        return server.sockets[0].getsockname()[1]

    yield start

    for server in servers:
        server.close()
        await server.wait_closed()
