from __future__ import annotations

from datetime import datetime
from typing import Any, Dict

from kivy.clock import Clock
from kivy.core.window import Window
from kivy.logger import Logger
from kivy.utils import platform
from kivymd.app import MDApp
from kivymd.toast import toast
from kivymd.uix.boxlayout import MDBoxLayout

from models.catalog import find_store_item
from services.economy import Economy, daily_bonus_due
from services.persistence import Persistence
from services.state import PetEngine
from services.tuning import Session
from ui.components import PetScreenManager, TopBar


class PetPocketApp(MDApp):
    title = "PetPocket"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.engine = PetEngine()
        self.persistence: Persistence | None = None
        self.profile: Dict[str, Any] = {}
        self.topbar: TopBar | None = None
        self.sm: PetScreenManager | None = None

    # ---------- App lifecycle ----------
    def build(self):
        self.theme_cls.theme_style = "Dark"
        self.theme_cls.primary_palette = "Teal"
        if platform not in ("android", "ios"):
            Window.size = (420, 780)

        self.persistence = Persistence(self.user_data_dir)
        self.profile = self.persistence.load_profile()
        loaded = self.persistence.load(self.engine)
        Logger.info(f"PetPocket: {'restored saved pet' if loaded else 'no saved pet'}")

        root = MDBoxLayout(orientation="vertical")
        self.topbar = TopBar(switch_to=self.show_screen)
        self.sm = PetScreenManager()
        root.add_widget(self.topbar)
        root.add_widget(self.sm)
        self.sm.current = "pet" if self.engine.pet.adopted else "adopt"

        self.engine.add_observer(self._on_state_changed)
        Clock.schedule_interval(self._tick, Session.TICK_INTERVAL_S)
        Clock.schedule_interval(self._save, Session.AUTOSAVE_INTERVAL_S)
        return root

    def on_start(self):
        self._tick(0)
        self._grant_daily_bonus()
        self._on_state_changed()

    def on_pause(self):
        self._save()
        return True

    def on_stop(self):
        self._save()

    # ---------- Session driver ----------
    def _tick(self, _dt: float) -> None:
        self.engine.tick()

    def _save(self, *_) -> None:
        if self.persistence:
            self.persistence.save(self.engine)

    def _grant_daily_bonus(self) -> None:
        if not self.engine.pet.adopted or self.engine.pet.is_dead:
            return
        now = datetime.now()
        if not daily_bonus_due(self.profile.get("last_daily_bonus"), now):
            return
        self.engine.add_coins(Economy.DAILY_BONUS)
        self.profile["last_daily_bonus"] = now.isoformat()
        self._save_profile()
        toast(f"🎁 Daily Bonus! +{Economy.DAILY_BONUS} coins")

    def _archive_if_dead(self) -> None:
        pet = self.engine.pet
        if not pet.is_dead or not self.persistence:
            return
        if self.profile.get("memorialized_created_at") == pet.created_at:
            return
        record = self.engine.memorial()
        if record and self.persistence.archive_memorial(record):
            self.profile["memorialized_created_at"] = pet.created_at
            self._save_profile()
            Logger.info(f"PetPocket: archived memorial for {pet.name}")

    def _on_state_changed(self) -> None:
        self._archive_if_dead()
        pet = self.engine.pet
        if self.topbar:
            self.topbar.update(pet.coins, pet.level, pet.xp)
        if self.sm:
            self.sm.refresh_current()

    # ---------- Store inventory (external ledger) ----------
    def inventory(self) -> Dict[str, int]:
        return self.profile.setdefault("inventory", {})

    def buy_item(self, item_id: str) -> bool:
        item = find_store_item(item_id)
        if item is None or not self.engine.spend_coins(item.cost):
            return False
        inv = self.inventory()
        inv[item.id] = inv.get(item.id, 0) + 1
        self._save_profile()
        return True

    def use_item(self, item_id: str) -> bool:
        inv = self.inventory()
        if inv.get(item_id, 0) <= 0 or not self.engine.use_item(item_id):
            return False
        inv[item_id] -= 1
        if inv[item_id] <= 0:
            del inv[item_id]
        self._save_profile()
        return True

    def _save_profile(self) -> None:
        if self.persistence:
            self.persistence.save_profile(self.profile)

    # ---------- Navigation ----------
    def show_screen(self, name: str) -> None:
        if not self.sm:
            return
        if name != "adopt" and not self.engine.pet.adopted:
            name = "adopt"
        self.sm.current = name
        self.sm.refresh_current()


if __name__ == "__main__":
    PetPocketApp().run()
