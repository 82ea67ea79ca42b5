"""Connect to a relay, send one prompt and print the streamed answer."""

import argparse
import asyncio

from geminirelay import RelayClient, RelayConfig


async def run(host: str, prompt: str, timeout: float) -> None:
    async with RelayClient.connect(host, timeout=timeout) as client:
        print(f"connected: {host}")
        print(client.greeting.content)
        async for event in client.stream(prompt):
            if event.type == "chunk":
                print(event.content, end="", flush=True)
            elif event.type == "error":
                print(f"\n[error] {event.content}")
        print()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser()
    parser.add_argument("--host", default="ws://127.0.0.1:8080")
    parser.add_argument("--prompt", default="Hello")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    asyncio.run(run(args.host, args.prompt, RelayConfig().client_timeout_seconds))


if __name__ == "__main__":
    main()
