# -*- coding: utf-8 -*-
"""Renderização das abas."""

from tabs.tab_register import render as render_register
from tabs.tab_family import render as render_family
from tabs.tab_announcements import render as render_announcements
from tabs.tab_calendar import render as render_calendar
from tabs.tab_gallery import render as render_gallery
from tabs.tab_prayer import render as render_prayer
from tabs.tab_retreat import render as render_retreat
from tabs.tab_admin import render as render_admin

__all__ = [
    "render_register",
    "render_family",
    "render_announcements",
    "render_calendar",
    "render_gallery",
    "render_prayer",
    "render_retreat",
    "render_admin",
]
