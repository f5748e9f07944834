"""Example driver: a green beam sweeping around the room, leaving a fading trail."""

import math
from pathlib import Path

from spatial_led import Data, Rgb, Sled

LAYOUT = Path(__file__).with_name("room.sled")
STEPS = 240
TIMESTEP = 1.0 / 120.0


def step(sled: Sled, data: Data) -> None:
    elapsed = data.get("elapsed", float) + TIMESTEP
    data.set("elapsed", elapsed)

    sled.map(lambda led: led.color * 0.95)
    sled.blend_at_angle(elapsed * 2.0, Rgb(0.0, 1.0, 0.0))


def main() -> None:
    sled = Sled.from_file(LAYOUT)
    data = Data()
    data.set("elapsed", 0.0)

    for _ in range(STEPS):
        step(sled, data)

    lit = sled.filter(lambda led: led.color.g > 0.05)
    print(f"{len(lit)} of {sled.num_leds} LEDs still glowing")
    brightest = max(sled.read(), key=lambda led: led.color.g)
    angle = math.degrees(brightest.angle)
    print(f"Brightest LED: {brightest.index} at {angle:.1f} degrees")


if __name__ == "__main__":
    main()
