"""Kivy app: ANC calculator, vaccination tracker, Insta Calc and assistant tabs."""

from __future__ import annotations

import threading
import traceback
from datetime import date, datetime
from io import BytesIO
from pathlib import Path

from jyoti_tool.assistant import (
    QUICK_PROMPTS,
    AssistantConfig,
    AssistantService,
    ChatSession,
)
from jyoti_tool.excel_writer import (
    ExcelLayout,
    schedule_export_path,
    write_schedule_xlsx,
)
from jyoti_tool.formatting import UNIT_LABELS, format_display_date
from jyoti_tool.forms import (
    InputError,
    breakdown_days,
    duration_between,
    offset_date,
    pregnancy_from_edd,
    pregnancy_from_lmp,
    schedule_from_birth_date,
)
from jyoti_tool.model import ChatMessage, PregnancyResult, VaccinationEvent
from jyoti_tool.speech import SpeechCapture, append_transcript
from jyoti_tool.storage import LOGO_URL, SQLiteStore, decode_profile_image

DANGER_SIGNS = [
    "योनि से रक्तस्राव",
    "हाथ-पांव में सूजन",
    "तेज सिरदर्द",
    "शिशु की हलचल कम होना",
]
REFERRAL_NOTE = "तुरंत PHC/FRU में रेफर करें!"
TOOL_MODES = [("DIFF", "अंतर"), ("OFFSET", "जोड़ें/घटाएं"), ("DAYS", "कुल दिन")]


def run_app() -> int:
    """Launch the Kivy app."""
    from kivy.app import App
    from kivy.clock import Clock
    from kivy.core.image import Image as CoreImage
    from kivy.core.window import Window
    from kivy.uix.boxlayout import BoxLayout
    from kivy.uix.button import Button
    from kivy.uix.filechooser import FileChooserListView
    from kivy.uix.gridlayout import GridLayout
    from kivy.uix.image import AsyncImage, Image
    from kivy.uix.label import Label
    from kivy.uix.popup import Popup
    from kivy.uix.scrollview import ScrollView
    from kivy.uix.tabbedpanel import TabbedPanel, TabbedPanelItem
    from kivy.uix.textinput import TextInput
    from kivy.uix.togglebutton import ToggleButton

    class JyotiApp(App):
        """Main Kivy app."""

        def __init__(self, **kwargs: object) -> None:
            super().__init__(**kwargs)
            self.store = SQLiteStore(Path.cwd() / "jyoti_tool.sqlite3")
            self.app_config = self.store.load_config()
            self.chat = ChatSession(
                AssistantService(
                    AssistantConfig.from_env(
                        model=self.app_config.model,
                        temperature=self.app_config.temperature,
                        timeout_seconds=self.app_config.timeout_seconds,
                    )
                )
            )
            self.speech = SpeechCapture(language=self.app_config.speech_language)
            self.tool_mode = "DIFF"
            self.status: Label | None = None
            self.profile_box: BoxLayout | None = None

        def build(self) -> BoxLayout:
            Window.bind(on_key_down=self._on_key_down)

            root = BoxLayout(orientation="vertical", spacing=6, padding=8)
            self.status = Label(text="", size_hint_y=None, height=28)
            header = BoxLayout(orientation="horizontal", size_hint_y=None, height=64)
            header.add_widget(Label(text="Jyoti - ANM सहायक", bold=True))
            self.profile_box = BoxLayout(size_hint_x=None, width=64)
            header.add_widget(self.profile_box)
            profile_btn = Button(text="Profile", size_hint_x=None, width=80)
            profile_btn.bind(on_press=self._open_image_chooser)
            header.add_widget(profile_btn)
            root.add_widget(header)
            self._show_profile_image()

            panel = TabbedPanel(do_default_tab=False, tab_width=120)
            panel.add_widget(self._build_pregnancy_tab())
            panel.add_widget(self._build_vaccination_tab())
            panel.add_widget(self._build_tools_tab())
            panel.add_widget(self._build_assistant_tab())
            root.add_widget(panel)

            root.add_widget(self.status)
            return root

        def _on_key_down(
            self,
            _window: object,
            keycode: int,
            _scancode: int,
            _text: str,
            _modifiers: list[str],
        ) -> bool:
            # Esc / Android back button closes the app.
            if keycode != 27:
                return False
            self.stop()
            return True

        # ----- ANC -----

        def _build_pregnancy_tab(self) -> TabbedPanelItem:
            tab = TabbedPanelItem(text="ANC")
            box = BoxLayout(orientation="vertical", spacing=8, padding=8)
            lmp_input = TextInput(hint_text="LMP (YYYY-MM-DD)", multiline=False)
            edd_input = TextInput(hint_text="EDD (YYYY-MM-DD)", multiline=False)
            error = Label(text="", color=(0.8, 0.1, 0.1, 1))
            result = Label(text="", halign="center")

            def show(res: PregnancyResult) -> None:
                age = res.gestational_age
                result.text = (
                    f"EDD: {format_display_date(res.edd)}\n"
                    f"LMP: {format_display_date(res.lmp)}\n"
                    f"{age.weeks} {UNIT_LABELS['weeks']}  {age.days} "
                    f"{UNIT_LABELS['days']}"
                )

            def on_lmp(instance: TextInput) -> None:
                edd_input.text = ""
                error.text = ""
                if not instance.text.strip():
                    result.text = ""
                    return
                try:
                    show(pregnancy_from_lmp(instance.text, date.today()))
                except InputError as exc:
                    result.text = ""
                    error.text = exc.message

            def on_edd(instance: TextInput) -> None:
                lmp_input.text = ""
                error.text = ""
                if not instance.text.strip():
                    result.text = ""
                    return
                try:
                    show(pregnancy_from_edd(instance.text, date.today()))
                except InputError as exc:
                    result.text = ""
                    error.text = exc.message

            lmp_input.bind(on_text_validate=on_lmp)
            edd_input.bind(on_text_validate=on_edd)
            box.add_widget(Label(text="अंतिम माहवारी (LMP)", size_hint_y=None, height=24))
            box.add_widget(lmp_input)
            box.add_widget(Label(text="OR / या फिर", size_hint_y=None, height=24))
            box.add_widget(
                Label(text="प्रसव की अपेक्षित तिथि (EDD)", size_hint_y=None, height=24)
            )
            box.add_widget(edd_input)
            box.add_widget(error)
            box.add_widget(result)

            danger = BoxLayout(orientation="vertical", spacing=2)
            danger.add_widget(Label(text="खतरे के लक्षण", bold=True))
            for sign in DANGER_SIGNS:
                danger.add_widget(Label(text=f"- {sign}"))
            danger.add_widget(Label(text=REFERRAL_NOTE, bold=True))
            box.add_widget(danger)
            tab.add_widget(box)
            return tab

        # ----- Vaccination -----

        def _build_vaccination_tab(self) -> TabbedPanelItem:
            tab = TabbedPanelItem(text="टीकाकरण")
            box = BoxLayout(orientation="vertical", spacing=8, padding=8)
            birth_input = TextInput(
                hint_text="जन्म तिथि (YYYY-MM-DD)",
                multiline=False,
                size_hint_y=None,
                height=40,
            )
            error = Label(text="", size_hint_y=None, height=28, color=(0.8, 0.1, 0.1, 1))
            grid = GridLayout(cols=1, spacing=4, size_hint_y=None)
            grid.bind(minimum_height=grid.setter("height"))
            scroll = ScrollView()
            scroll.add_widget(grid)
            current: list[VaccinationEvent] = []
            export_btn = Button(
                text="Export Excel", size_hint_y=None, height=40, disabled=True
            )

            def clear() -> None:
                grid.clear_widgets()
                current.clear()
                export_btn.disabled = True

            def render(events: list[VaccinationEvent]) -> None:
                clear()
                current.extend(events)
                export_btn.disabled = False
                for event in events:
                    grid.add_widget(
                        Label(
                            text=(
                                f"[b]{event.age_label}[/b]  "
                                f"{format_display_date(event.due_date)}\n"
                                f"{event.primary_label}\n{event.localized_label}"
                            ),
                            markup=True,
                            size_hint_y=None,
                            height=72,
                        )
                    )

            def on_birth(instance: TextInput) -> None:
                error.text = ""
                if not instance.text.strip():
                    clear()
                    return
                try:
                    render(schedule_from_birth_date(instance.text, date.today()))
                except InputError as exc:
                    clear()
                    error.text = exc.message

            def on_export(_: object) -> None:
                if not current:
                    return
                out_path = schedule_export_path(
                    self.app_config.export_dir, current[0].due_date, datetime.now()
                )
                try:
                    write_schedule_xlsx(current, out_path, ExcelLayout())
                except Exception as exc:
                    self._show_error("export", exc)
                    return
                if self.status is not None:
                    self.status.text = f"Excel: {out_path}"

            birth_input.bind(on_text_validate=on_birth)
            export_btn.bind(on_press=on_export)
            box.add_widget(birth_input)
            box.add_widget(error)
            box.add_widget(scroll)
            box.add_widget(export_btn)
            tab.add_widget(box)
            return tab

        # ----- Insta Calc -----

        def _build_tools_tab(self) -> TabbedPanelItem:
            tab = TabbedPanelItem(text="Insta Calc")
            box = BoxLayout(orientation="vertical", spacing=8, padding=8)
            modes = BoxLayout(orientation="horizontal", size_hint_y=None, height=40)
            date1 = TextInput(hint_text="Start / Base date", multiline=False)
            date2 = TextInput(hint_text="End date", multiline=False)
            years = TextInput(hint_text="Y", text="0", multiline=False)
            months = TextInput(hint_text="M", text="0", multiline=False)
            days = TextInput(hint_text="D", text="0", multiline=False)
            total = TextInput(hint_text="Total days", text="0", multiline=False)
            result = Label(text="", font_size="22sp")

            def recompute(*_args: object) -> None:
                result.text = ""
                try:
                    if self.tool_mode == "DIFF":
                        if date1.text and date2.text:
                            duration = duration_between(date1.text, date2.text)
                            result.text = _ymd_text(duration)
                    elif self.tool_mode == "OFFSET":
                        if date1.text:
                            target = offset_date(
                                date1.text, years.text, months.text, days.text
                            )
                            result.text = format_display_date(target)
                    else:
                        result.text = _ymd_text(breakdown_days(total.text))
                except InputError as exc:
                    result.text = exc.message

            def set_mode(mode: str) -> None:
                self.tool_mode = mode
                recompute()

            for mode, label in TOOL_MODES:
                btn = ToggleButton(
                    text=label, group="tool_mode", state="down" if mode == "DIFF" else "normal"
                )
                btn.bind(on_press=lambda _btn, m=mode: set_mode(m))
                modes.add_widget(btn)

            for widget in (date1, date2, years, months, days, total):
                widget.bind(text=recompute)

            offsets = BoxLayout(orientation="horizontal", size_hint_y=None, height=40)
            for widget in (years, months, days):
                offsets.add_widget(widget)

            box.add_widget(modes)
            for widget in (date1, date2):
                widget.size_hint_y = None
                widget.height = 40
                box.add_widget(widget)
            box.add_widget(offsets)
            total.size_hint_y = None
            total.height = 40
            box.add_widget(total)
            box.add_widget(Label(text="गणना परिणाम (Result)", size_hint_y=None, height=24))
            box.add_widget(result)
            tab.add_widget(box)
            return tab

        # ----- Assistant -----

        def _build_assistant_tab(self) -> TabbedPanelItem:
            tab = TabbedPanelItem(text="Jyoti")
            box = BoxLayout(orientation="vertical", spacing=6, padding=6)
            transcript = TextInput(readonly=True, text="", multiline=True)
            quick = BoxLayout(orientation="horizontal", size_hint_y=None, height=40)
            entry = TextInput(hint_text="सवाल लिखें...", multiline=False)
            mic_btn = Button(text="Mic", size_hint_x=None, width=60)
            send_btn = Button(text="Send", size_hint_x=None, width=80)
            mic_btn.disabled = not self.speech.available

            def render(pending: str | None = None) -> None:
                lines = [_chat_line(m) for m in self.chat.history]
                if pending:
                    lines.append(_chat_line(ChatMessage(role="user", text=pending)))
                    lines.append("...")
                transcript.text = "\n\n".join(lines)

            def on_reply(_dt: float) -> None:
                send_btn.disabled = False
                render()

            def send(*_args: object) -> None:
                text = entry.text
                if not text.strip() or self.chat.is_loading:
                    return
                entry.text = ""
                send_btn.disabled = True
                render(pending=text.strip())

                def worker() -> None:
                    self.chat.send(text)
                    Clock.schedule_once(on_reply)

                threading.Thread(target=worker, daemon=True).start()

            def on_transcript(text: str | None) -> None:
                mic_btn.text = "Mic"
                entry.text = append_transcript(entry.text, text)

            def listen(*_args: object) -> None:
                mic_btn.text = "..."

                def worker() -> None:
                    text = self.speech.listen()
                    Clock.schedule_once(lambda _dt: on_transcript(text))

                threading.Thread(target=worker, daemon=True).start()

            for prompt in QUICK_PROMPTS:
                btn = Button(text=prompt)
                btn.bind(on_press=lambda _btn, p=prompt: setattr(entry, "text", p))
                quick.add_widget(btn)

            entry.bind(on_text_validate=send)
            send_btn.bind(on_press=send)
            mic_btn.bind(on_press=listen)

            row = BoxLayout(orientation="horizontal", size_hint_y=None, height=44)
            row.add_widget(entry)
            row.add_widget(mic_btn)
            row.add_widget(send_btn)
            box.add_widget(transcript)
            box.add_widget(quick)
            box.add_widget(row)
            tab.add_widget(box)
            return tab

        # ----- Profile image -----

        def _show_profile_image(self) -> None:
            if self.profile_box is None:
                return
            self.profile_box.clear_widgets()
            payload = self.store.load_profile_image()
            try:
                decoded = decode_profile_image(payload)
                if decoded is None:
                    self.profile_box.add_widget(AsyncImage(source=payload))
                    return
                raw, ext = decoded
                texture = CoreImage(BytesIO(raw), ext=ext).texture
            except Exception as exc:
                self._show_error("load profile image", exc)
                self.profile_box.add_widget(AsyncImage(source=LOGO_URL))
                return
            self.profile_box.add_widget(Image(texture=texture))

        def _open_image_chooser(self, _: object) -> None:
            chooser = FileChooserListView(
                path=str(Path.home()),
                filters=["*.png", "*.jpg", "*.jpeg", "*.webp"],
            )
            buttons = BoxLayout(orientation="horizontal", size_hint_y=None, height=40)
            cancel_btn = Button(text="Cancel")
            use_btn = Button(text="Use image")
            buttons.add_widget(cancel_btn)
            buttons.add_widget(use_btn)

            content = BoxLayout(orientation="vertical")
            content.add_widget(chooser)
            content.add_widget(buttons)
            popup = Popup(
                title="Profile image",
                content=content,
                size_hint=(0.9, 0.9),
            )
            cancel_btn.bind(on_press=lambda *_args: popup.dismiss())

            def apply_selection(*_: object) -> None:
                if not chooser.selection:
                    return
                try:
                    self.store.save_profile_image(Path(chooser.selection[0]))
                    self._show_profile_image()
                except Exception as exc:
                    self._show_error("save image", exc)
                popup.dismiss()

            use_btn.bind(on_press=apply_selection)
            chooser.bind(on_submit=lambda *_args: apply_selection())
            popup.open()

        def _show_error(self, action: str, exc: Exception) -> None:
            error_type = type(exc).__name__
            if self.status is not None:
                self.status.text = f"Could not {action} ({error_type}): {exc}"
            traceback.print_exc()

    JyotiApp().run()
    return 0


def _ymd_text(duration: object) -> str:
    return "   ".join(
        f"{getattr(duration, key)} {UNIT_LABELS[key]}"
        for key in ("years", "months", "days")
    )


def _chat_line(message: ChatMessage) -> str:
    prefix = "आप" if message.role == "user" else "Jyoti"
    return f"{prefix}: {message.text}"
