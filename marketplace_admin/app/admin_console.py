from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from clients.marketplace_sdk.errors import ApiError
from clients.marketplace_sdk.stores_client import STORE_STATUSES

from marketplace_admin.app.container import AppContainer
from marketplace_admin.app.error_presenter import build_error_payload, print_error_banner, user_message
from marketplace_admin.app.state import SessionState
from marketplace_admin.app.ui.filters import parse_filter_assignment
from marketplace_admin.app.ui.pagination import PaginationState, goto_page, next_page, prev_page
from marketplace_admin.app.ui.table_printer import normalize_value, print_table
from marketplace_admin.app.views.dashboard_view import STAT_LABELS, DashboardView
from marketplace_admin.app.views.resource_list_view import ResourceListView
from marketplace_admin.app.views.towns_view import CITY_FILTER_KEY, TownsView


@dataclass(frozen=True)
class ListModule:
    key: str
    title: str
    columns: tuple[tuple[str, str], ...]
    create_fields: tuple[str, ...] = ()
    can_delete: bool = False
    can_toggle: bool = True


LIST_MODULES = {
    "1": ListModule(
        key="cities",
        title="Cities",
        columns=(("id", "id"), ("enName", "name (en)"), ("arName", "name (ar)"), ("isActive", "status")),
        create_fields=("enName", "arName"),
        can_delete=True,
    ),
    "2": ListModule(
        key="towns",
        title="Towns",
        columns=(("id", "id"), ("enName", "name (en)"), ("arName", "name (ar)"), ("town", "city"), ("isActive", "status")),
        create_fields=("enName", "arName", "townId"),
        can_delete=True,
    ),
    "3": ListModule(
        key="stores",
        title="Stores",
        columns=(("id", "id"), ("name", "name"), ("status", "status"), ("createdAt", "created")),
    ),
    "4": ListModule(
        key="users",
        title="Users",
        columns=(("id", "id"), ("name", "name"), ("email", "email"), ("role", "role"), ("isActive", "status")),
        can_toggle=False,
    ),
    "5": ListModule(
        key="business-types",
        title="Business types",
        columns=(("id", "id"), ("code", "code"), ("en_name", "name (en)"), ("ar_name", "name (ar)"), ("is_active", "status")),
        create_fields=("en_name", "ar_name", "code"),
    ),
}


class AdminConsole:
    def __init__(
        self,
        container: AppContainer,
        session: SessionState,
        reader: Callable[[str], str] | None = None,
    ) -> None:
        self.container = container
        self.session = session
        self._reader = reader

    async def run(self) -> None:
        while True:
            self.session.current_module = "main_menu"
            print("\nMarketplace admin")
            print(f"API: {self.session.base_url or 'N/A'} role={self.session.role or 'N/A'}")
            for option, module in LIST_MODULES.items():
                print(f"{option}. {module.title}")
            print("6. Dashboard")
            print("7. Clear cache")
            print("8. Exit")
            option = (await self._ask("Select an option: ")).strip().lower()

            if option in LIST_MODULES:
                await self.run_list(LIST_MODULES[option])
            elif option == "6":
                await self.run_dashboard()
            elif option == "7":
                self.container.cache.clear_all_cache()
                print("Cache cleared.")
            elif option in {"8", "q"}:
                return
            else:
                print("Invalid option.")

    async def run_list(self, module: ListModule) -> None:
        self.session.current_module = module.key
        view = self._open_view(module.key)
        await self._guarded(view.mount())
        try:
            while True:
                self._render(module, view)
                raw = (await self._ask("cmd: ")).strip()
                command, _, argument = raw.partition(" ")
                command = command.lower()
                argument = argument.strip()
                if command == "b":
                    return
                await self._guarded(self._dispatch(module, view, command, argument))
        finally:
            view.unmount()
            self.session.current_module = "main_menu"

    async def run_dashboard(self) -> None:
        self.session.current_module = "dashboard"
        view = self.container.dashboard_view(self.session.role)
        await self._guarded(view.mount())
        try:
            while True:
                self._render_dashboard(view)
                command = (await self._ask("cmd (r=refresh, b=back): ")).strip().lower()
                if command == "b":
                    return
                if command == "r":
                    await self._guarded(view.refresh())
                else:
                    print("Invalid command.")
        finally:
            view.unmount()
            self.session.current_module = "main_menu"

    async def _dispatch(self, module: ListModule, view: ResourceListView, command: str, argument: str) -> None:
        coordinator = view.coordinator
        if command == "s":
            term = argument if argument else await self._ask("search: ")
            coordinator.set_search(term)
            await coordinator.wait_idle()
        elif command == "f":
            await self._apply_filter(view, argument or await self._ask("filter (key=value): "))
        elif command == "c":
            await coordinator.clear_filters()
        elif command in {"n", "p", "g"}:
            pagination = PaginationState.from_listing(view.state.value, page=coordinator.state.page, limit=coordinator.state.limit)
            if command == "n":
                next_page(pagination)
            elif command == "p":
                prev_page(pagination)
            else:
                requested = argument or (await self._ask("page: ")).strip()
                if not requested.isdigit():
                    self._print_validation_error("page must be a positive number.")
                    return
                goto_page(pagination, int(requested))
            await coordinator.set_page(pagination.page)
        elif command == "z":
            requested = argument or (await self._ask("page size: ")).strip()
            if not requested.isdigit() or int(requested) < 1:
                self._print_validation_error("page size must be a positive number.")
                return
            await coordinator.set_limit(int(requested))
        elif command == "r":
            print("[refresh] Reloading without cache...")
            await coordinator.refresh(force=True)
        elif command == "a" and module.create_fields:
            payload = await self._prompt_payload(module.create_fields, required=True)
            if payload is None:
                return
            created = await view.create(payload)
            print(f"Created: {created}")
        elif command == "e" and module.create_fields:
            item_id = await self._require_id(argument)
            if not item_id:
                return
            payload = await self._prompt_payload(module.create_fields, required=False)
            if not payload:
                self._print_validation_error("nothing to update.")
                return
            await view.update(item_id, payload)
            print(f"Updated: {item_id}")
        elif command == "t" and module.can_toggle:
            item_id = await self._require_id(argument)
            if item_id:
                await view.toggle_status(item_id)
                print(f"Status toggled: {item_id}")
        elif command == "u" and module.key == "stores":
            await self._update_store_status(view, await self._require_id(argument))
        elif command == "d" and module.can_delete:
            item_id = await self._require_id(argument)
            if item_id and (await self._ask(f"Delete {item_id}? (y/N): ")).strip().lower() == "y":
                await view.delete(item_id)
                print(f"Deleted: {item_id}")
        else:
            print("Invalid command.")

    async def _apply_filter(self, view: ResourceListView, raw: str) -> None:
        assignment = parse_filter_assignment(raw)
        if assignment is None:
            self._print_validation_error("use key=value, an empty value clears the filter.")
            return
        key, value = assignment
        if isinstance(view, TownsView) and key in {"city", CITY_FILTER_KEY}:
            await view.filter_by_city(value)
            return
        await view.coordinator.set_filter(key, value)

    async def _update_store_status(self, view: ResourceListView, store_id: str | None) -> None:
        if not store_id:
            return
        status = (await self._ask(f"status ({'/'.join(STORE_STATUSES)}): ")).strip().lower()
        if status not in STORE_STATUSES:
            self._print_validation_error(f"unknown store status: {status or '(empty)'}")
            return
        reason = (await self._ask("reason (optional): ")).strip()
        await view.mutate(self.container.stores.update_status, store_id, status, reason)
        print(f"Store {store_id}: {status}")

    async def _prompt_payload(self, fields: tuple[str, ...], *, required: bool) -> dict[str, Any] | None:
        payload: dict[str, Any] = {}
        for field_name in fields:
            value = (await self._ask(f"{field_name}: ")).strip()
            if value:
                payload[field_name] = value
        missing = [field_name for field_name in fields if field_name not in payload]
        if required and missing:
            self._print_validation_error(f"required: {', '.join(missing)}")
            return None
        return payload

    async def _require_id(self, argument: str) -> str | None:
        item_id = argument or (await self._ask("id: ")).strip()
        if not item_id:
            self._print_validation_error("id is required.")
            return None
        return item_id

    async def _guarded(self, operation: Any) -> Any:
        try:
            return await operation
        except (ApiError, LookupError, ValueError) as error:
            if isinstance(error, ApiError):
                print_error_banner(build_error_payload(error))
            else:
                self._print_validation_error(str(error))
            return None

    def _open_view(self, key: str) -> ResourceListView:
        factories: dict[str, Callable[[], ResourceListView]] = {
            "cities": self.container.cities_view,
            "towns": self.container.towns_view,
            "stores": self.container.stores_view,
            "users": self.container.users_view,
            "business-types": self.container.business_types_view,
        }
        return factories[key]()

    def _render(self, module: ListModule, view: ResourceListView) -> None:
        state = view.state
        coordinator = view.coordinator
        pagination = PaginationState.from_listing(state.value, page=coordinator.state.page, limit=coordinator.state.limit)
        filters = ", ".join(f"{key}={value}" for key, value in coordinator.state.filters.items()) or "none"
        search = coordinator.state.debounced_search_term or "none"
        print(f"\n[{module.title}] search={search} filters={filters} {pagination.label()}")
        if isinstance(view, TownsView) and CITY_FILTER_KEY in coordinator.state.filters:
            city_id = coordinator.state.filters[CITY_FILTER_KEY]
            print(f"City: {view.city_name(city_id) or city_id}")
        if state.error is not None:
            print(f"[error] last load failed: {user_message(state.error)}")
        print_table(module.title.upper(), state.rows, list(module.columns))
        print("\n" + self._commands_help(module))

    def _render_dashboard(self, view: DashboardView) -> None:
        print(f"\n[Dashboard] role={self.session.role or 'N/A'}")
        if view.state.error is not None:
            print(f"[error] last load failed: {user_message(view.state.error)}")
        stats = view.stats
        for key, label in STAT_LABELS:
            print(f"{label}: {normalize_value(stats.get(key, 0))}")

    @staticmethod
    def _commands_help(module: ListModule) -> str:
        commands = ["s=search", "f=filter key=value", "c=clear filters", "n=next", "p=prev", "g=goto", "z=page size", "r=refresh"]
        if module.create_fields:
            commands += ["a=create", "e <id>=edit"]
        if module.can_toggle:
            commands.append("t <id>=toggle status")
        if module.key == "stores":
            commands.append("u <id>=set status")
        if module.can_delete:
            commands.append("d <id>=delete")
        commands.append("b=back")
        return "Commands: " + ", ".join(commands)

    def _print_validation_error(self, message: str, code: str = "UI_VALIDATION") -> None:
        print_error_banner(
            {
                "category": "validation",
                "code": code,
                "message": message,
                "trace_id": None,
                "action": "Check the values and try again",
            }
        )

    async def _ask(self, prompt: str) -> str:
        # Off the loop thread, so debounced fetches keep running while the operator types.
        reader = self._reader or input
        return await asyncio.to_thread(reader, prompt)
