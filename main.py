import logging
import tkinter as tk

from plan_logics import config
from plan_logics.api_client import ApiClient, MemoryKeyValueStore
from plan_UIs.app import PlanningApp


logger = logging.getLogger(__name__)


def main():
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        logger.info("Starting GUI (API base %s)", config.API_BASE)
        tokens = MemoryKeyValueStore({config.TOKEN_KEY: config.API_TOKEN} if config.API_TOKEN else None)
        root = tk.Tk()
        PlanningApp(root, ApiClient(config.API_BASE, tokens))
        logger.info("GUI ready. Entering mainloop...")
        root.mainloop()
    except Exception:
        logger.exception("GUI crashed")
        raise


if __name__ == "__main__":
    main()
