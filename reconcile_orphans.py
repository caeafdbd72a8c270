# reconcile_orphans.py
#
# Lists video files whose metadata sidecar is missing (left behind when an
# upload failed between the file write and the metadata write).
# Pass --delete to remove them.

import argparse
import logging
import sys

from src.core.dependencies import get_video_store
from src.core.errors import VideoStoreError

logger = logging.getLogger("reconcile_orphans")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Find video files without metadata.")
    parser.add_argument("--delete", action="store_true", help="delete the orphaned files")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    store = get_video_store()

    try:
        orphans = store.find_orphaned_files()
        for orphan in orphans:
            print(orphan.key)

        if args.delete and orphans:
            store.object_store.delete([orphan.key for orphan in orphans])
            logger.info("Deleted %d orphaned file(s)", len(orphans))
        else:
            logger.info("Found %d orphaned file(s)", len(orphans))
    except VideoStoreError as e:
        logger.error("Reconciliation failed: %s", e)
        return 1
    finally:
        store.object_store.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
