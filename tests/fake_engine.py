"""Stand-in for the pdf-toolkit engine, driven by environment variables.

FAKE_ENGINE_STDOUT / FAKE_ENGINE_STDERR: text to write (stdout defaults to
an echo of argv), FAKE_ENGINE_SLEEP: seconds to sleep, FAKE_ENGINE_EXIT:
exit code. Writes a small manifest when --manifest is given.
"""

import json
import os
import sys
import time


def main(argv):
    sys.stdout.write(os.environ.get("FAKE_ENGINE_STDOUT") or "args: " + " ".join(argv) + "\n")
    sys.stdout.flush()
    err = os.environ.get("FAKE_ENGINE_STDERR", "")
    if err:
        sys.stderr.write(err)
        sys.stderr.flush()

    sleep = float(os.environ.get("FAKE_ENGINE_SLEEP") or 0)
    if sleep:
        time.sleep(sleep)

    if "--manifest" in argv:
        manifest = argv[argv.index("--manifest") + 1]
        os.makedirs(os.path.dirname(manifest), exist_ok=True)
        with open(manifest, "w", encoding="utf-8") as f:
            json.dump({"argv": argv}, f)

    return int(os.environ.get("FAKE_ENGINE_EXIT") or 0)


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
