# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP management API."""

from .app import api_routes, create_app

__all__ = ["api_routes", "create_app"]
