"""Example: request/reply between two clients sharing one in-memory server."""

import logging

from natsmock import Registry, connect

logging.basicConfig(level=logging.INFO)


def main() -> None:
    registry = Registry()

    responder = connect({"url": "nats://demo:4222"}, registry=registry)
    requester = connect({"url": "nats://demo:4222"}, registry=registry)
    requester.on("connect", lambda: print("requester connected"))

    def greet(message, reply_to, subject):
        responder.publish(reply_to, f"hello, {message}")

    responder.subscribe("greet", greet)

    sid = requester.request("greet", "world", lambda reply, _, __: print(reply))
    requester.unsubscribe(sid)

    requester.close()
    responder.close()
    registry.scheduler.run_pending()


if __name__ == "__main__":
    main()
