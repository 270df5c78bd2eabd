class QuestFocusError(Exception):
    pass


class ValidationError(QuestFocusError):
    pass


class TimerError(QuestFocusError):
    pass


class StoreError(QuestFocusError):
    pass
