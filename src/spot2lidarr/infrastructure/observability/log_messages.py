"""Structured log message templates for consistent, human-readable logging.

Hey future me - instead of "Error: 400" we want logs an operator can act on:

    🔴 Lidarr Connection Failed
    ├─ Service: Lidarr
    ├─ Target: http://lidarr:8686
    ├─ Reason: Lidarr 401 on GET /system/status: Unauthorized
    └─ 💡 Check LIDARR_URL and LIDARR_API_KEY (Settings > General in Lidarr)

Principles:
1. **Icon First** - 🔴 error, ⚠️ warning, ✅ success
2. **Action/Entity** - what failed or succeeded
3. **Context** - names, ids, counts
4. **Hints** - what to check next
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class LogTemplate:
    """A reusable log message template with placeholders.

    The format() method replaces {placeholders} in field values and the hint, and
    lays the fields out as a tree below the title.
    """

    icon: str
    title: str
    fields: dict[str, str]
    hint: str | None = None

    def format(self, **kwargs: Any) -> str:
        """Format the template with provided values.

        Args:
            **kwargs: Values to fill into template placeholders

        Returns:
            Formatted multi-line log message with icon, title, fields, and optional hint
        """
        lines = [f"{self.icon} {self.title}"]

        field_items = list(self.fields.items())
        for i, (key, value_template) in enumerate(field_items):
            # Last field uses └─ instead of ├─
            prefix = "└─" if i == len(field_items) - 1 and not self.hint else "├─"
            try:
                value = value_template.format(**kwargs)
            except KeyError as e:
                value = f"<missing: {e}>"
            lines.append(f"{prefix} {key}: {value}")

        if self.hint:
            try:
                hint_text = self.hint.format(**kwargs)
            except KeyError as e:
                hint_text = f"<missing: {e}>"
            lines.append(f"└─ 💡 {hint_text}")

        return "\n".join(lines)


class LogMessages:
    """Collection of standardized log message templates."""

    # === Connection Errors ===

    @staticmethod
    def connection_failed(
        service: str,
        target: str,
        error: str | None = None,
        hint: str | None = None,
    ) -> str:
        """Format a connection failure message.

        Args:
            service: Service name (e.g., "Lidarr", "Spotify")
            target: Connection target (URL)
            error: Error message from exception
            hint: Custom troubleshooting hint

        Returns:
            Formatted log message
        """
        # Hey future me - values go in as literal text, so escape braces or a URL
        # template like "{id}" would be treated as a placeholder.
        fields = {"Service": _literal(service), "Target": _literal(target)}
        if error:
            fields["Reason"] = _literal(error)

        template = LogTemplate(
            icon="🔴",
            title=f"{service} Connection Failed",
            fields=fields,
            hint=_literal(hint or f"Check if {service} is running and accessible"),
        )
        return template.format()

    # === Migration ===

    @staticmethod
    def migration_item_failed(artist: str, reason: str, hint: str | None = None) -> str:
        """Format the message for one artist that could not be migrated.

        Args:
            artist: Source artist display name
            reason: Outcome message
            hint: Optional troubleshooting hint

        Returns:
            Formatted log message
        """
        template = LogTemplate(
            icon="⚠️",
            title="Artist Not Migrated",
            fields={"Artist": _literal(artist), "Reason": _literal(reason)},
            hint=_literal(hint) if hint else None,
        )
        return template.format()

    @staticmethod
    def migration_completed(
        total: int,
        added: int,
        exists: int,
        failed: int,
        skipped: int = 0,
    ) -> str:
        """Format the end-of-run summary.

        Args:
            total: Items processed in this run
            added: Artists newly added to Lidarr
            exists: Artists that were already present
            failed: Artists that could not be resolved or added
            skipped: Artists skipped

        Returns:
            Formatted log message
        """
        icon = "✅" if failed == 0 else "⚠️"
        template = LogTemplate(
            icon=icon,
            title="Migration Completed",
            fields={
                "Processed": "{total}",
                "Added": "{added}",
                "Already in Lidarr": "{exists}",
                "Failed": "{failed}",
                "Skipped": "{skipped}",
            },
            hint="Failed artists can be added manually in Lidarr" if failed else None,
        )
        return template.format(
            total=total, added=added, exists=exists, failed=failed, skipped=skipped
        )

    @staticmethod
    def migration_aborted(reason: str) -> str:
        """Format the message for a run that stopped during pre-flight."""
        template = LogTemplate(
            icon="🔴",
            title="Migration Aborted",
            fields={"Reason": _literal(reason)},
            hint="Pick a quality profile, metadata profile and root folder first",
        )
        return template.format()


def _literal(value: str) -> str:
    return value.replace("{", "{{").replace("}", "}}")
