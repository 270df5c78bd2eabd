from .app import QuestFocusApp


def main() -> None:
    QuestFocusApp().run()


if __name__ == "__main__":
    main()
