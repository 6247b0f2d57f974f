"""Scripted Heketi server for httpx.MockTransport."""

import httpx

TEST_SECRET = "test-secret-with-at-least-32-bytes!!"
TEST_URL = "http://heketi:8080"


class FakeHeketi:
    """Routes map (method, path) to responses served in order.

    The last response for a route repeats once the others are used up.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], list[httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, *responses: httpx.Response) -> None:
        self.routes.setdefault((method, path), []).extend(responses)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, text="no route")
        if len(queue) > 1:
            return queue.pop(0)
        return queue[0]

    def calls(self, method: str, path: str) -> int:
        return sum(
            1 for r in self.requests if r.method == method and r.url.path == path
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def respond(
    status: int, *, location: str | None = None, json: object = None, text: str = ""
) -> httpx.Response:
    """Build a scripted response."""
    headers = {"Location": location} if location else {}
    if json is not None:
        return httpx.Response(status, headers=headers, json=json)
    return httpx.Response(status, headers=headers, text=text)
