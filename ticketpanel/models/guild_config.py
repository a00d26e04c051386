from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import StrictBool, StrictFloat, StrictInt, StrictStr

from .base import Record

# Discord ids arrive as strings from the panel, occasionally as numbers from older tooling.
Snowflake = Union[StrictStr, StrictInt]

# Scalars are checked strictly: "2" is not an order and "true" is not a flag.
Number = Union[StrictInt, StrictFloat]


class Brand(Record):
    name: Optional[str] = None
    icon: Optional[str] = None


class PanelTheme(Record):
    bg: Optional[str] = None
    accent: Optional[str] = None
    text: Optional[str] = None


class Panel(Record):
    banner_url: Optional[str] = None
    theme: Optional[PanelTheme] = None
    title: Optional[str] = None
    layout: Optional[str] = None


class ChannelBindings(Record):
    panel_channel_id: Optional[Snowflake] = None
    log_channel_id: Optional[Snowflake] = None
    ratings_channel_id: Optional[Snowflake] = None


class TicketButton(Record):
    id: str
    title: Optional[str] = None
    subtitle: Optional[str] = None
    label: Optional[str] = None
    emoji: Optional[str] = None
    order: Optional[Number] = None
    visible: Optional[StrictBool] = None


class FormField(Record):
    type: Optional[str] = None
    id: Optional[str] = None
    label: Optional[str] = None
    placeholder: Optional[str] = None
    required: Optional[StrictBool] = None
    max_len: Optional[StrictInt] = None


class TicketForm(Record):
    title: Optional[str] = None
    fields: Optional[List[FormField]] = None


class Permissions(Record):
    staff_role_id: Optional[Snowflake] = None
    high_staff_role_id: Optional[Snowflake] = None
    buycraft_role_id: Optional[Snowflake] = None
    # command name -> required role level ("staff", "highStaff", ...)
    commands: Optional[Dict[str, str]] = None


class Misc(Record):
    tienda_url: Optional[str] = None
    server_ip: Optional[str] = None


class GuildConfig(Record):
    """
    Per-guild panel configuration.

    Validation checks the shape of every known section and keeps unknown keys.
    Saving stores exactly what the caller sent (see to_stored), so a save is a
    wholesale replace, never a merge with defaults.
    """

    brand: Optional[Brand] = None
    panel: Optional[Panel] = None
    channels: Optional[ChannelBindings] = None
    buttons: Optional[List[TicketButton]] = None
    forms: Optional[Dict[str, TicketForm]] = None
    permissions: Optional[Permissions] = None
    misc: Optional[Misc] = None

    def to_stored(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


def default_guild_config() -> Dict[str, Any]:
    """
    Effective configuration of a guild that never saved one.
    Built fresh on every call; never persisted implicitly.
    """
    return {
        "brand": {"name": "Service Bot", "icon": "https://i.imgur.com/S2hhXYT.png"},
        "panel": {
            "bannerUrl": "https://i.imgur.com/hc282wH.png",
            "theme": {"bg": "#0f0f10", "accent": "#6e57ff", "text": "#ffffff"},
            "title": "Panel de Tickets",
            "layout": "list",
        },
        "channels": {
            "panelChannelId": None,
            "logChannelId": None,
            "ratingsChannelId": None,
        },
        "buttons": [
            {
                "id": "ticket_general",
                "title": "Soporte General",
                "subtitle": "Ayuda en general.",
                "label": "💬 Soporte",
                "emoji": "💬",
                "order": 1,
                "visible": True,
            }
        ],
        "forms": {
            "ticket_general": {
                "title": "Formulario",
                "fields": [
                    {
                        "type": "short",
                        "id": "usuario",
                        "label": "¿Nombre de usuario?",
                        "placeholder": "Tu nick",
                        "required": True,
                        "maxLen": 100,
                    },
                    {
                        "type": "paragraph",
                        "id": "problema",
                        "label": "Problema",
                        "placeholder": "Describe tu situación",
                        "required": True,
                        "maxLen": 1000,
                    },
                ],
            }
        },
        "permissions": {
            "staffRoleId": None,
            "highStaffRoleId": None,
            "buycraftRoleId": None,
            "commands": {"reiniciarreclamos": "highStaff", "reclamos": "staff"},
        },
        "misc": {"tiendaUrl": "tienda.com", "serverIp": "Server.net"},
    }
