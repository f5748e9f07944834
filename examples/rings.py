"""Example: concentric rings expanding from a point, then corners highlighted."""

from spatial_led import Rgb, Sled

TEXT = """
center (0, 0.5)
density 20
polyline (-2, 0) -> (0.5, -1) -> (3.5, 0) -> (2, 2) -> (-2, 2) -> (-2, 0)
"""


def main() -> None:
    sled = Sled.from_text(TEXT)
    colors = [Rgb(1, 0, 0), Rgb(0, 1, 0), Rgb(0, 0, 1)]
    for ring, radius in enumerate((1.0, 2.0, 3.0)):
        selection = sled.at_dist_from((3.5, 0.0), radius)
        print(f"radius {radius}: LEDs {list(selection)}")
        sled.set_filter(selection, colors[ring])

    sled.set_vertices(Rgb(1, 1, 1))
    for led in sled.get_vertices():
        print(f"vertex LED {led.index} at {led.position}")


if __name__ == "__main__":
    main()
