# ui/components.py
from __future__ import annotations

from typing import Callable, Dict, List, Optional

from kivy.app import App
from kivy.metrics import dp
from kivymd.toast import toast
from kivymd.uix.boxlayout import MDBoxLayout
from kivymd.uix.button import MDFlatButton, MDRaisedButton
from kivymd.uix.label import MDLabel
from kivymd.uix.screen import MDScreen
from kivymd.uix.screenmanager import MDScreenManager
from kivymd.uix.scrollview import MDScrollView
from kivymd.uix.textfield import MDTextField

from models.catalog import (
    CRITICAL_EVENT_INFO,
    FOOD_ITEMS,
    MISBEHAVIOR_INFO,
    PERSONALITY_INFO,
    SPECIES_INFO,
    STORE_ITEMS,
    WEATHER_INFO,
)
from models.events import TAP_EVENTS
from models.pet import DIFFICULTIES, NEED_STATS, SPECIES, fmt_age
from services.economy import xp_needed


# ---------------------------------------------------------------------------
# Utilities
# ---------------------------------------------------------------------------
def _app():
    return App.get_running_app()


def _engine():
    """Return the PetEngine stored on the running App (if present)."""
    return getattr(_app(), "engine", None)


def _button(text: str, on_press: Callable[[], None], flat: bool = False):
    cls = MDFlatButton if flat else MDRaisedButton
    return cls(text=text, on_release=lambda *_: on_press())


def _row(*widgets) -> MDBoxLayout:
    row = MDBoxLayout(orientation="horizontal", spacing=dp(6), adaptive_height=True)
    for w in widgets:
        row.add_widget(w)
    return row


# ---------------------------------------------------------------------------
# Top bar
# ---------------------------------------------------------------------------
class TopBar(MDBoxLayout):
    """Coins, level and xp; plus buttons to switch screens."""

    def __init__(self, switch_to: Callable[[str], None], **kwargs) -> None:
        super().__init__(orientation="vertical", adaptive_height=True, padding=dp(8), **kwargs)
        self._label = MDLabel(text="", halign="center", adaptive_height=True)
        self.add_widget(self._label)
        self.add_widget(_row(*[
            _button(title, lambda name=name: switch_to(name), flat=True)
            for name, title in (("pet", "Pet"), ("shop", "Shop"), ("memorial", "Memorial"))
        ]))

    def update(self, coins: int, level: int, xp: float) -> None:
        self._label.text = f"💰 {coins}   ⭐ Lv {level} ({int(xp)}/{xp_needed(level)} xp)"


# ---------------------------------------------------------------------------
# Screens
# ---------------------------------------------------------------------------
class BaseScreen(MDScreen):
    def refresh(self) -> None:  # overridden by children
        pass


class AdoptScreen(BaseScreen):
    """Pick a name, species and difficulty."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._species = SPECIES[0]
        self._difficulty = "normal"
        box = MDBoxLayout(orientation="vertical", spacing=dp(10), padding=dp(16))
        self._name = MDTextField(hint_text="Name (1-16 characters)", max_text_length=16)
        self._species_btn = _button("", self._next_species)
        self._difficulty_btn = _button("", self._next_difficulty)
        box.add_widget(MDLabel(text="Adopt a new friend", halign="center", font_style="H5"))
        box.add_widget(self._name)
        box.add_widget(self._species_btn)
        box.add_widget(self._difficulty_btn)
        box.add_widget(_button("Adopt", self.on_adopt))
        self.add_widget(box)
        self.refresh()

    def _next_species(self) -> None:
        self._species = SPECIES[(SPECIES.index(self._species) + 1) % len(SPECIES)]
        self.refresh()

    def _next_difficulty(self) -> None:
        self._difficulty = DIFFICULTIES[(DIFFICULTIES.index(self._difficulty) + 1) % len(DIFFICULTIES)]
        self.refresh()

    def refresh(self) -> None:
        info = SPECIES_INFO[self._species]
        self._species_btn.text = f"Species: {info['emoji']} {info['name']}"
        self._difficulty_btn.text = f"Difficulty: {self._difficulty}"

    def on_adopt(self) -> None:
        eng = _engine()
        if not eng:
            return
        try:
            eng.adopt(self._name.text, self._species, self._difficulty)
        except ValueError as exc:
            toast(str(exc))
            return
        _app().show_screen("pet")


class PetScreen(BaseScreen):
    """Stats, care actions and prompts for emergencies and misbehavior."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        box = MDBoxLayout(orientation="vertical", spacing=dp(6), padding=dp(12))
        self._header = MDLabel(text="", halign="center", font_style="H5", adaptive_height=True)
        self._status = MDLabel(text="", halign="center", adaptive_height=True)
        self._stats = MDLabel(text="", halign="left", adaptive_height=True)
        self._sleep_btn = _button("Sleep", self.on_toggle_sleep)
        self._event_label = MDLabel(text="", halign="center", adaptive_height=True)
        self._event_row = _row(
            _button("Tap!", lambda: self._act(_engine().tap_event, None)),
            _button("Comfort", lambda: self._act(_engine().resolve_event, "Can't do that now.")),
            _button("Ignore", lambda: self._act(_engine().dismiss_event, None), flat=True),
        )
        self._misbehavior_label = MDLabel(text="", halign="center", adaptive_height=True)
        self._misbehavior_row = _row(*[
            _button(resp.title(), lambda resp=resp: self._act(lambda: _engine().discipline(resp), None))
            for resp in ("scold", "praise", "ignore")
        ])
        for w in (self._header, self._status, self._stats):
            box.add_widget(w)
        box.add_widget(_row(
            _button("Play", lambda: self._act(_engine().play, "Too tired or asleep.")),
            _button("Clean", lambda: self._act(_engine().clean, None)),
            self._sleep_btn,
            _button("Heal", lambda: self._act(_engine().heal, "Not enough coins.")),
        ))
        for w in (self._event_label, self._event_row, self._misbehavior_label, self._misbehavior_row):
            box.add_widget(w)
        box.add_widget(_button("Start over", self.on_reset, flat=True))
        self.add_widget(box)

    def _act(self, action: Callable[[], bool], fail_msg: Optional[str]) -> None:
        if not _engine():
            return
        if not action() and fail_msg:
            toast(fail_msg)
        self.refresh()

    def on_toggle_sleep(self) -> None:
        eng = _engine()
        if not eng:
            return
        (eng.wake if eng.pet.is_sleeping else eng.sleep)()
        self.refresh()

    def on_reset(self) -> None:
        eng = _engine()
        if eng:
            eng.reset()
            _app().show_screen("adopt")

    def refresh(self) -> None:
        eng = _engine()
        if not eng:
            return
        pet = eng.pet
        evo = eng.evolution()
        self._header.text = f"{evo.emoji}{evo.aura} {pet.name} the {evo.name} ({evo.label})"
        weather = WEATHER_INFO[pet.weather]
        persona = PERSONALITY_INFO[pet.personality]
        flags = []
        if pet.is_dead:
            flags.append(f"💀 {pet.death_cause}")
        if pet.is_sleeping:
            flags.append("💤 asleep")
        if pet.is_sick:
            flags.append("🤒 sick")
        if pet.poops:
            flags.append("💩" * pet.poops)
        self._status.text = (
            f"{pet.stage} • {fmt_age(pet.age)} • {weather['emoji']} {weather['name']} • "
            f"{persona['emoji']} {persona['name']}" + ("\n" + " ".join(flags) if flags else "")
        )
        self._stats.text = "\n".join(
            f"{stat.title():<10} {int(getattr(pet, stat)):>3}" for stat in NEED_STATS
        ) + f"\nBond       {int(pet.bond):>3}"
        self._sleep_btn.text = "Wake" if pet.is_sleeping else "Sleep"

        event = pet.active_event
        if event:
            info = CRITICAL_EVENT_INFO[event]
            taps = f" ({pet.event_taps}/{TAP_EVENTS[event]})" if event in TAP_EVENTS else ""
            self._event_label.text = f"{info['emoji']} {info['name']} {info['instruction']}{taps}"
        else:
            self._event_label.text = ""
        self._event_row.disabled = event is None
        self._event_row.opacity = 1 if event else 0

        mis = pet.active_misbehavior
        self._misbehavior_label.text = (
            f"{MISBEHAVIOR_INFO[mis]['emoji']} {MISBEHAVIOR_INFO[mis]['desc']}" if mis else ""
        )
        self._misbehavior_row.disabled = mis is None
        self._misbehavior_row.opacity = 1 if mis else 0


class ShopScreen(BaseScreen):
    """Feed from the food catalog; buy and use store items."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        scroll = MDScrollView()
        box = MDBoxLayout(orientation="vertical", spacing=dp(6), padding=dp(12), adaptive_height=True)
        box.add_widget(MDLabel(text="Feed", font_style="H6", adaptive_height=True))
        for food in FOOD_ITEMS:
            box.add_widget(_button(
                f"{food.emoji} {food.name}  💰{food.cost}",
                lambda food_id=food.id: self.on_feed(food_id),
            ))
        box.add_widget(MDLabel(text="Store", font_style="H6", adaptive_height=True))
        self._use_buttons: Dict[str, MDFlatButton] = {}
        for item in STORE_ITEMS:
            use_btn = _button("", lambda item_id=item.id: self.on_use(item_id), flat=True)
            self._use_buttons[item.id] = use_btn
            box.add_widget(_row(
                _button(f"{item.emoji} {item.name} ({item.desc})  💰{item.cost}",
                        lambda item_id=item.id: self.on_buy(item_id)),
                use_btn,
            ))
        scroll.add_widget(box)
        self.add_widget(scroll)

    def on_feed(self, food_id: str) -> None:
        eng = _engine()
        if not eng:
            return
        before = eng.pet.happiness
        if eng.feed(food_id):
            toast("Yum!")
        elif eng.pet.happiness < before:
            toast("Your picky eater refused that!")
        else:
            toast("Can't feed right now.")

    def on_buy(self, item_id: str) -> None:
        ok = _app().buy_item(item_id)
        toast("Added to your inventory." if ok else "Not enough coins!")
        self.refresh()

    def on_use(self, item_id: str) -> None:
        ok = _app().use_item(item_id)
        toast("Used!" if ok else "None left.")
        self.refresh()

    def refresh(self) -> None:
        inventory = _app().inventory()
        for item in STORE_ITEMS:
            self._use_buttons[item.id].text = f"Use ({inventory.get(item.id, 0)})"


class MemorialScreen(BaseScreen):
    """Pets that have passed on."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._label = MDLabel(text="", halign="left", valign="top", padding=(dp(12), dp(12)))
        self.add_widget(self._label)

    def refresh(self) -> None:
        records: List[Dict] = _app().persistence.load_memorials()
        if not records:
            self._label.text = "No memorials yet."
            return
        self._label.text = "\n\n".join(
            f"🪦 {r.get('name')} the {r.get('evolution_name')} • Lv {r.get('level')} • "
            f"{fmt_age(float(r.get('age_minutes', 0)))}\n{r.get('death_cause')}"
            for r in reversed(records)
        )


class PetScreenManager(MDScreenManager):
    SCREENS = {
        "adopt": AdoptScreen,
        "pet": PetScreen,
        "shop": ShopScreen,
        "memorial": MemorialScreen,
    }

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        for name, cls in self.SCREENS.items():
            self.add_widget(cls(name=name))

    def refresh_current(self) -> None:
        screen = self.get_screen(self.current)
        if hasattr(screen, "refresh"):
            screen.refresh()
