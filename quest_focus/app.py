import datetime
from tkinter import messagebox

import customtkinter as ctk
from dotenv import load_dotenv

from .config import (
    APP_TITLE,
    APPDATA_DIR,
    STORE_FILE,
    TICK_INTERVAL_MS,
)
from .utils import ensure_dir, seconds_to_hhmmss, minutes_to_hm
from .logging_setup import setup_logger
from .audio import play_level_up, play_session_complete
from .errors import TimerError, ValidationError
from .feedback import Feedback, FeedbackClient
from .ledger import daily_minutes, recent
from .leveling import level_progress, total_xp
from .session_flow import FinishStatus, end_session
from .quest_store import QuestStore
from .timer import StudyTimer
from .tray import TrayController


ctk.set_appearance_mode("Dark")
ctk.set_default_color_theme("blue")

CHART_WIDTH = 24


class QuestFocusApp:
    def __init__(self):
        ensure_dir(APPDATA_DIR)
        load_dotenv()

        self.logger = setup_logger()
        self.logger.info("App start")

        self.store = QuestStore(STORE_FILE, self.logger)
        self.store.load()

        self.timer = StudyTimer()
        self.feedback = FeedbackClient(self.logger)
        self._closing = False

        self.root = ctk.CTk()
        self.root.title(APP_TITLE)
        self.root.geometry("460x760")
        self.root.minsize(460, 760)
        self.root.protocol("WM_DELETE_WINDOW", self.hide_to_tray)

        self.tray = TrayController(
            title=APP_TITLE,
            on_show=self.show_from_tray,
            on_quit=self.quit_app,
        )

        self._build_ui()
        self._refresh_progress_ui()
        self._refresh_timer_ui()
        self._schedule_tick()

    # UI
    def _build_ui(self) -> None:
        self.header = ctk.CTkLabel(self.root, text=APP_TITLE, font=("Roboto", 26, "bold"))
        self.header.pack(pady=(18, 8))

        self.frame_level = ctk.CTkFrame(self.root)
        self.frame_level.pack(padx=18, pady=(6, 10), fill="x")

        self.level_label = ctk.CTkLabel(self.frame_level, text="Lvl 1", font=("Arial", 16, "bold"))
        self.level_label.grid(row=0, column=0, sticky="w", padx=12, pady=(10, 4))

        self.xp_label = ctk.CTkLabel(self.frame_level, text="0 / 500 XP", text_color="gray")
        self.xp_label.grid(row=0, column=1, sticky="e", padx=12, pady=(10, 4))

        self.level_bar = ctk.CTkProgressBar(self.frame_level, progress_color="#f59e0b")
        self.level_bar.grid(row=1, column=0, columnspan=2, sticky="ew", padx=12, pady=(6, 10))
        self.level_bar.set(0.0)

        self.frame_level.grid_columnconfigure(0, weight=1)
        self.frame_level.grid_columnconfigure(1, weight=1)

        self.tabs = ctk.CTkTabview(self.root)
        self.tabs.pack(padx=18, pady=8, fill="both", expand=True)
        tab_timer = self.tabs.add("Timer")
        tab_log = self.tabs.add("Quest Log")
        tab_fame = self.tabs.add("Hall of Fame")

        ctk.CTkLabel(tab_timer, text="Current quest (subject):", anchor="w").pack(
            fill="x", padx=12, pady=(10, 4)
        )
        self.subject_entry = ctk.CTkEntry(
            tab_timer, placeholder_text="e.g. Calculus II, React Hooks, History Essay..."
        )
        self.subject_entry.pack(padx=12, pady=(0, 12), fill="x")

        self.timer_label = ctk.CTkLabel(tab_timer, text="00:00", font=("Consolas", 56, "bold"))
        self.timer_label.pack(pady=(18, 0))
        self.timer_status = ctk.CTkLabel(tab_timer, text="Paused", text_color="gray")
        self.timer_status.pack(pady=(0, 18))

        self.frame_buttons = ctk.CTkFrame(tab_timer, fg_color="transparent")
        self.frame_buttons.pack(padx=12, pady=6, fill="x")
        self.frame_buttons.grid_columnconfigure(0, weight=1)
        self.frame_buttons.grid_columnconfigure(1, weight=1)

        self.start_btn = ctk.CTkButton(
            self.frame_buttons,
            text="Start",
            fg_color="#0284c7",
            hover_color="#0ea5e9",
            command=self.start_session,
        )
        self.start_btn.grid(row=0, column=0, padx=6, sticky="ew")

        self.pause_btn = ctk.CTkButton(
            self.frame_buttons,
            text="Pause",
            fg_color="#555555",
            hover_color="#777777",
            command=self.pause_session,
        )
        self.pause_btn.grid(row=0, column=1, padx=6, sticky="ew")

        self.finish_btn = ctk.CTkButton(
            self.frame_buttons,
            text="Finish",
            fg_color="#c0392b",
            hover_color="#e74c3c",
            command=self.finish_session,
        )
        self.finish_btn.grid(row=1, column=0, columnspan=2, padx=6, pady=(10, 0), sticky="ew")

        self.feedback_title = ctk.CTkLabel(tab_timer, text="", font=("Arial", 16, "bold"), text_color="#f59e0b")
        self.feedback_title.pack(fill="x", padx=12, pady=(18, 2))
        self.feedback_label = ctk.CTkLabel(tab_timer, text="", wraplength=380, justify="left")
        self.feedback_label.pack(fill="x", padx=12, pady=(0, 12))

        self.log_box = ctk.CTkTextbox(tab_log, font=("Consolas", 13))
        self.log_box.pack(fill="both", expand=True, padx=6, pady=6)
        self.log_box.configure(state="disabled")

        self.fame_box = ctk.CTkTextbox(tab_fame, font=("Arial", 14))
        self.fame_box.pack(fill="both", expand=True, padx=6, pady=6)
        self.fame_box.configure(state="disabled")

        self.footer = ctk.CTkLabel(
            self.root,
            text='Tip: Click "X" to hide to tray. Use tray menu to show or quit.',
            text_color="gray",
        )
        self.footer.pack(pady=(0, 12))

    @staticmethod
    def _set_text(box: ctk.CTkTextbox, content: str) -> None:
        box.configure(state="normal")
        box.delete("1.0", "end")
        box.insert("1.0", content)
        box.configure(state="disabled")

    def _refresh_timer_ui(self) -> None:
        running = self.timer.running
        elapsed = self.timer.elapsed()

        self.timer_label.configure(text=seconds_to_hhmmss(elapsed), text_color="#0ea5e9" if running else "gray")
        self.timer_status.configure(text="Focusing..." if running else "Paused")
        self.start_btn.configure(state="disabled" if running else "normal")
        self.pause_btn.configure(state="normal" if running else "disabled")
        self.finish_btn.configure(state="normal" if int(elapsed) > 0 else "disabled")
        self.subject_entry.configure(state="disabled" if running else "normal")

    def _refresh_progress_ui(self) -> None:
        state = self.store.state()
        stats = state.stats

        self.level_label.configure(text=f"Lvl {stats.level}")
        self.xp_label.configure(text=f"{stats.current_xp} / {stats.next_level_xp} XP")
        self.level_bar.set(level_progress(stats))

        lines = [
            f"Total time: {minutes_to_hm(stats.total_study_minutes)}",
            f"Streak:     {stats.streak_days} days",
            f"Total XP:   {total_xp(stats)}",
            "",
            "Activity (last 7 days):",
        ]
        week = daily_minutes(state.sessions)
        peak = max([m for _, m in week] + [1])
        for day, minutes in week:
            weekday = datetime.date.fromisoformat(day).strftime("%a")
            bar = "#" * int(round(CHART_WIDTH * minutes / peak))
            lines.append(f"{weekday} {bar:<{CHART_WIDTH}} {minutes} min")

        lines += ["", "Recent sessions:"]
        last5 = recent(state.sessions)
        if not last5:
            lines.append("No quests completed yet.")
        for s in last5:
            started = datetime.datetime.fromtimestamp(s.start_time / 1000.0).strftime("%Y-%m-%d %H:%M")
            lines.append(f"- {s.subject} | {started} | {s.duration_minutes} min | +{s.xp_earned} XP")
        self._set_text(self.log_box, "\n".join(lines))

        fame = []
        for ach in state.achievements:
            mark = "UNLOCKED" if ach.unlocked else "locked"
            fame.append(f"{ach.icon}  {ach.title}  [{mark}]\n    {ach.description}\n")
        self._set_text(self.fame_box, "\n".join(fame))

    def _show_feedback(self, feedback: Feedback | None) -> None:
        if feedback is None:
            self.feedback_title.configure(text="")
            self.feedback_label.configure(text="")
            return
        title = "Victory!" if feedback.type == "victory" else "Quest Update"
        self.feedback_title.configure(text=title)
        self.feedback_label.configure(text=f'"{feedback.message}"')

    def _schedule_tick(self) -> None:
        if self._closing:
            return
        self._refresh_timer_ui()
        self.root.after(TICK_INTERVAL_MS, self._schedule_tick)

    # Session controls
    def start_session(self) -> None:
        subject = self.subject_entry.get().strip()
        if not subject:
            messagebox.showwarning(APP_TITLE, "Please enter a subject quest before starting!")
            return
        try:
            self.timer.start()
        except TimerError:
            self.logger.warning("Start ignored: session already running")
            return
        self._show_feedback(None)
        self._refresh_timer_ui()
        self.logger.info(f"Session started subject={subject!r}")

    def pause_session(self) -> None:
        self.timer.pause()
        self._refresh_timer_ui()
        self.logger.info(f"Session paused elapsed={self.timer.elapsed():.1f}")

    def finish_session(self) -> None:
        subject = self.subject_entry.get().strip()
        start_ms, end_ms, elapsed = self.timer.stop()
        self._refresh_timer_ui()

        try:
            result = end_session(
                self.store,
                self.feedback,
                self.logger,
                subject,
                start_ms,
                end_ms,
                elapsed,
                confirm_discard=lambda: messagebox.askyesno(
                    APP_TITLE, "Session is less than 1 minute. Discard it?"
                ),
                on_feedback=lambda fb: self.root.after(0, lambda: self._show_feedback(fb)),
            )
        except ValidationError as e:
            self.logger.warning(f"Finish rejected: {e}")
            messagebox.showwarning(APP_TITLE, "Please enter a subject quest before finishing!")
            return

        if result.status is FinishStatus.NOTHING:
            return
        self._reset_timer()
        if result.status is FinishStatus.DISCARDED:
            return

        outcome = result.outcome
        self._refresh_progress_ui()
        if result.feedback_thread is not None:
            self.feedback_title.configure(text="")
            self.feedback_label.configure(text="The Quest Master is reviewing your session...")

        if outcome.leveled_up:
            play_level_up()
            messagebox.showinfo(APP_TITLE, f"LEVEL UP!\nYou are now Level {outcome.state.stats.level}.")
        else:
            play_session_complete()
        for ach in outcome.unlocked:
            messagebox.showinfo(APP_TITLE, f"Achievement unlocked: {ach.icon} {ach.title}\n{ach.description}")

    def _reset_timer(self) -> None:
        self.timer.reset()
        self.subject_entry.configure(state="normal")
        self.subject_entry.delete(0, "end")
        self._refresh_timer_ui()

    # Tray
    def hide_to_tray(self) -> None:
        self.logger.info("Hide to tray")
        self.tray.ensure_running()
        self.root.withdraw()

    def show_from_tray(self) -> None:
        self.logger.info("Show from tray")

        def _do():
            self.root.deiconify()
            self.root.lift()
            self.root.focus_force()

        self.root.after(0, _do)

    def quit_app(self) -> None:
        self.logger.info("Quit requested")
        self._closing = True
        # A running session is not committed on quit; only Finish records one.
        if self.timer.elapsed() > 0:
            self.logger.info(f"Unfinished session dropped elapsed={self.timer.elapsed():.1f}")
        self.store.save()

        def _do():
            self.tray.stop()
            self.root.destroy()

        self.root.after(0, _do)

    def run(self) -> None:
        self.root.mainloop()
        self.logger.info("App stopped")
