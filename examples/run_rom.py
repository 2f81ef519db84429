import argparse
import logging
import sys
import time
from pathlib import Path

# Ensure local repo package is used even if another "chip8vm" is on PYTHONPATH.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from chip8vm import TickDriver, load_config


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a CHIP-8 ROM headless and print the screen.")
    parser.add_argument("rom", help="Path to a CHIP-8 ROM")
    parser.add_argument(
        "--frames",
        type=int,
        default=60,
        help="Number of 60 Hz frames to run",
    )
    parser.add_argument("--config", default=None, help="Path to machine config YAML")
    return parser.parse_args()


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    args = parse_args()

    with TickDriver(config=load_config(args.config)) as driver:
        driver.load_file(args.rom)
        period = 1.0 / driver.config.machine.frame_rate
        for _ in range(args.frames):
            result = driver.frame()
            if not result.ok:
                print(f"Stopped: {result.reason} at 0x{result.address or 0:03X} ({result.detail})")
                break
            time.sleep(period)

        print(driver.state.framebuffer.render_text())
        print(f"Executed {driver.instruction_count} instructions")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
