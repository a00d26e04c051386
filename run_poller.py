"""
Publish poller entrypoint (reference bot-side consumer).

Operator notes:
- This file should remain extremely small and boring.
- All configuration validation happens inside run_poller().
- If this file crashes, the error should be immediately obvious to the operator.
"""

import logging
import sys

from ticketpanel.client import run_poller


def main() -> None:
    try:
        run_poller()
    except KeyboardInterrupt:
        pass
    except Exception:
        logging.basicConfig(level=logging.ERROR)
        logging.exception("Publish poller failed to start.")
        print("\n❌ Publish poller failed to start.")
        print("   See error above. Most common causes:")
        print("   - PANEL_API_KEY missing or not loaded into the environment")
        print("   - PANEL_GUILD_IDS empty")
        print("   - Invalid PANEL_API_BASE\n")
        sys.exit(1)


if __name__ == "__main__":
    main()
