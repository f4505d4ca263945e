"""Ordered buffer of client-side tracking fragments."""

from shopsense.tracking.schema import SCRIPT_CATEGORY_ORDER, QueuedScript, ScriptCategory


class EventQueue:
    """
    Collects script fragments during a request and prints them once.

    Fragments come out grouped by category in the order impression,
    pageview, event, whatever order they were added in. Within a category
    they keep insertion order. Not thread-safe: one queue per request.

    Usage:
        queue = EventQueue()
        queue.enqueue("event", "ga( 'send', {...} );")
        queue.enqueue("pageview", "ga( 'send', 'pageview' );")
        footer_js = queue.flush()
    """

    def __init__(self) -> None:
        self._scripts: list[QueuedScript] = []

    def enqueue(self, category: ScriptCategory, script: str) -> None:
        """Append a fragment to ``category``.

        Raises:
            ValueError: If ``category`` is not a known fragment category.
        """
        if category not in SCRIPT_CATEGORY_ORDER:
            raise ValueError(f"Unknown script category: {category!r}")
        self._scripts.append(QueuedScript(category=category, script=script))

    def flush(self) -> str:
        """Return all fragments in print order, each wrapped in newlines, and clear."""
        output = "".join(
            f"\n{queued.script}\n"
            for category in SCRIPT_CATEGORY_ORDER
            for queued in self._scripts
            if queued.category == category
        )
        self._scripts = []
        return output

    def __len__(self) -> int:
        return len(self._scripts)
