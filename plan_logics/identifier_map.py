import logging


logger = logging.getLogger(__name__)


class CompositeIdResolver:
    """
    Translates (category_code, group_id) into the backend's composite identifier.

    Built from seed triples. When the seed holds the same pair twice the first
    triple wins and the duplicate is logged. A row's composite_id_override
    always takes precedence over the lookup.

    Example:
        resolver = CompositeIdResolver(table.seed)
        resolver.resolve(2, 1)           # -> 1
        resolver.resolve_row(line_item)  # -> override, lookup, or None
    """

    def __init__(self, seed):
        self._map = {}
        for entry in seed:
            key = (int(entry.category_code), int(entry.group_id))
            if key in self._map:
                logger.warning(
                    "[MAPPING] Duplicate seed for category=%s group=%s: keeping %s, ignoring %s",
                    key[0], key[1], self._map[key], entry.composite_id,
                )
                continue
            self._map[key] = int(entry.composite_id)

    @classmethod
    def for_table(cls, table):
        return cls(table.seed)

    def __len__(self):
        return len(self._map)

    def resolve(self, category_code, group_id):
        """Return the composite id for the pair, or None when it is not mapped."""
        if category_code is None or group_id is None:
            return None
        return self._map.get((int(category_code), int(group_id)))

    def resolve_row(self, row):
        """Resolve a line item: override first, then the seed lookup."""
        if not row.is_item:
            return None
        if row.composite_id_override is not None:
            return int(row.composite_id_override)
        return self.resolve(row.category_code, row.group_id)

    def unmapped_rows(self, rows):
        """Item rows that resolve to no composite id."""
        return [r for r in rows if r.is_item and self.resolve_row(r) is None]

    def reverse_map(self, rows):
        """
        Build composite_id -> row code for every resolvable item row.

        If two rows resolve to the same composite id the first one keeps it.
        """
        out = {}
        for r in rows:
            cid = self.resolve_row(r)
            if cid is None:
                continue
            if cid in out:
                logger.warning("[MAPPING] Rows %s and %s share composite id %s", out[cid], r.code, cid)
                continue
            out[cid] = r.code
        return out
