"""Interactive CLI simulator: submit OTPs against a locally running app."""

import asyncio
import json

import httpx

from otp_login.config import settings

BLUE = "\033[94m"
GREEN = "\033[92m"
RED = "\033[91m"
YELLOW = "\033[93m"
DIM = "\033[2m"
BOLD = "\033[1m"
RESET = "\033[0m"

BASE_URL = "http://127.0.0.1:8000"


async def main() -> None:
    print(f"\n{BOLD}{'=' * 52}")
    print(f"  🔐  {settings.app_name}: OTP Simulator")
    print(f"{'=' * 52}{RESET}\n")

    print(f"{DIM}Tip: run seed.py first; it prints user ids and their OTPs{RESET}")
    print(f"{DIM}     Type 'quit' to exit, 'switch' to change user, 'session' to toggle cookie mode{RESET}\n")

    user_id = input(f"{YELLOW}User id: {RESET}").strip()
    session_mode = False

    # ── Start the app in the background ──────────────────
    import uvicorn
    from otp_login.main import app

    config = uvicorn.Config(app, host="127.0.0.1", port=8000, log_level="warning")
    server = uvicorn.Server(config)
    server_task = asyncio.create_task(server.serve())

    # Give the server a moment to start
    await asyncio.sleep(0.5)

    async with httpx.AsyncClient(base_url=BASE_URL) as client:
        while True:
            try:
                user_input = input(f"{BLUE}{BOLD}OTP:{RESET} ").strip()
            except (KeyboardInterrupt, EOFError):
                print(f"\n{DIM}Goodbye!{RESET}")
                break

            if not user_input:
                continue

            if user_input.lower() == "quit":
                print(f"{DIM}Goodbye!{RESET}")
                break

            if user_input.lower() == "switch":
                user_id = input(f"{YELLOW}New user id: {RESET}").strip()
                print(f"{DIM}Switched to {user_id}{RESET}\n")
                continue

            if user_input.lower() == "session":
                session_mode = not session_mode
                print(f"{DIM}Session mode {'on' if session_mode else 'off'}{RESET}\n")
                continue

            resp = await client.post(
                "/auth/otp/verify",
                json={"userId": user_id, "otp": user_input, "session": session_mode},
            )
            colour = GREEN if resp.status_code == 200 else RED
            print(f"{colour}{BOLD}{resp.status_code}:{RESET} {json.dumps(resp.json(), indent=2)}")
            if resp.cookies:
                print(f"{DIM}Cookies set: {', '.join(resp.cookies.keys())}{RESET}")
            print()

    # Shut down the background server
    server.should_exit = True
    await server_task


if __name__ == "__main__":
    asyncio.run(main())
