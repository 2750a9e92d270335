import os
import aiofiles

from core.errors import NotFoundError


class StoreResponse:
    def __init__(self, value: int, time_taken: float):
        self.value = value
        # Records scanned from the top of the file up to the match
        self.time_taken = time_taken


def _parse_record(line):
    parts = line.split(" ")
    if len(parts) != 2:
        raise ValueError(f"malformed record: {line!r}")
    return int(parts[0]), int(parts[1])


class BackingStore:
    """
    Line-oriented key/value file acting as the system of record.
    Each line holds one record: "<key> <value>". Record order is
    preserved across updates.
    """

    def __init__(self, filepath="persistence/store.txt"):
        self.filepath = filepath
        self.stats = {
            "fetches": 0,
            "pushes": 0,
            "records_scanned": 0,
        }

    async def lookup(self, key: int):
        """
        Scan the store from the top and stop at the first record for key.
        Raises NotFoundError if the key is absent, the file is missing,
        or a malformed line is hit before the match.
        """
        self.stats["fetches"] += 1
        if key < 0:
            raise NotFoundError(key)

        scanned = 0
        try:
            async with aiofiles.open(self.filepath, mode='r') as f:
                async for line in f:
                    scanned += 1
                    line = line.rstrip("\n")
                    record_key, value = _parse_record(line)
                    if record_key == key:
                        self.stats["records_scanned"] += scanned
                        return StoreResponse(value, float(scanned))
        except (OSError, ValueError) as e:
            self.stats["records_scanned"] += scanned
            raise NotFoundError(key, str(e)) from e

        self.stats["records_scanned"] += scanned
        raise NotFoundError(key)

    async def fetch(self, key: int):
        response = await self.lookup(key)
        return response.value

    async def push(self, key: int, new_value: int):
        """
        Overwrite the value of an existing record, keeping its position.
        Never creates a record: an absent key raises NotFoundError and
        leaves the file untouched.
        """
        self.stats["pushes"] += 1
        if key < 0:
            raise NotFoundError(key)

        found = False
        lines = []
        try:
            async with aiofiles.open(self.filepath, mode='r') as f:
                async for line in f:
                    line = line.rstrip("\n")
                    record_key, _ = _parse_record(line)
                    self.stats["records_scanned"] += 1
                    if record_key == key:
                        found = True
                        lines.append(f"{record_key} {new_value}")
                    else:
                        lines.append(line)
        except (OSError, ValueError) as e:
            raise NotFoundError(key, str(e)) from e

        if not found:
            raise NotFoundError(key)

        try:
            await self._rewrite(lines)
        except OSError as e:
            raise NotFoundError(key, str(e)) from e

    async def seed(self, records):
        """Replace the whole store with the given (key, value) pairs."""
        directory = os.path.dirname(self.filepath)
        if directory:
            os.makedirs(directory, exist_ok=True)
        await self._rewrite(f"{key} {value}" for key, value in records)

    async def _rewrite(self, lines):
        temp_filepath = f"{self.filepath}.tmp"
        try:
            async with aiofiles.open(temp_filepath, mode='w') as f:
                for line in lines:
                    await f.write(f"{line}\n")
                await f.flush()

            # Atomic swap: replaces the store with the rewritten copy
            os.replace(temp_filepath, self.filepath)
        except OSError as e:
            print(f"[BackingStore] Rewrite of {self.filepath} failed: {e}")
            if os.path.isfile(temp_filepath):
                os.remove(temp_filepath)
            raise

    def load(self):
        """
        Synchronous full read of the store, in file order.
        """
        if not os.path.exists(self.filepath):
            print(f"[BackingStore] No store file found at {self.filepath}")
            return []

        try:
            with open(self.filepath, "r") as f:
                return [_parse_record(line.rstrip("\n")) for line in f]
        except (OSError, ValueError) as e:
            print(f"[BackingStore] Failed to load {self.filepath}: {e}")
            return []
