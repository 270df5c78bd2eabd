import math
import threading
import pystray
from PIL import Image, ImageDraw


class TrayController:
    def __init__(self, title: str, on_show, on_quit):
        self._title = title
        self._on_show = on_show
        self._on_quit = on_quit

        self._icon = None
        self._thread = None
        self._running = False

    def _make_icon_image(self) -> Image.Image:
        # Amber star on a dark tile.
        img = Image.new("RGB", (64, 64), color=(15, 23, 42))
        draw = ImageDraw.Draw(img)
        draw.rounded_rectangle((6, 6, 58, 58), radius=12, fill=(2, 132, 199))
        points = []
        for i in range(10):
            r = 22 if i % 2 == 0 else 9
            angle = math.pi / 2 + i * math.pi / 5
            points.append((32 + r * math.cos(angle), 33 - r * math.sin(angle)))
        draw.polygon(points, fill=(245, 158, 11))
        return img

    def ensure_running(self) -> None:
        if self._icon is not None and self._running:
            return

        def on_show(icon, item):
            self._on_show()

        def on_quit(icon, item):
            self._on_quit()

        menu = pystray.Menu(
            pystray.MenuItem("Show", on_show, default=True),
            pystray.MenuItem("Quit", on_quit),
        )

        self._icon = pystray.Icon("QuestFocus", self._make_icon_image(), self._title, menu)

        def run_icon():
            self._running = True
            try:
                self._icon.run()
            finally:
                self._running = False

        self._thread = threading.Thread(target=run_icon, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        if self._icon is None:
            return
        try:
            self._icon.stop()
        except Exception:
            pass
        self._icon = None
