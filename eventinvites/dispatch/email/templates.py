from dataclasses import dataclass
from html import escape, unescape

from eventinvites.dispatch.email.base import EmailContent


@dataclass
class EmailTemplates:
    BRAND_NAME = "EventInvites"

    HTML_LAYOUT = """
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
        <title>{subject}</title>
    </head>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
        <h2 style="color: #1a1a1a; margin-bottom: 16px;">{title}</h2>
        {subtitle}
        {event_details}
        {description}
        {button}
        <hr style="border: none; border-top: 1px solid #ddd; margin: 30px 0;">
        <p style="font-size: 12px; color: #888; text-align: center;">
            Best regards,<br>The {brand_name} Team
        </p>
    </body>
    </html>
    """

    SUBTITLE_HTML = '<p style="font-size: 16px; color: #4a4a4a;">{subtitle}</p>'

    DETAILS_HTML = """
        <div style="background-color: #fafafa; border: 1px solid #e0e0e0; padding: 20px; margin: 20px 0;">
            {rows}
        </div>
    """

    DETAIL_ROW_HTML = "<p><strong>{label}:</strong> {value}</p>"

    DESCRIPTION_HTML = '<p style="font-size: 15px; color: #4a4a4a;">{description}</p>'

    BUTTON_HTML = """
        <div style="text-align: center; margin: 30px 0;">
            <a href="{url}" style="background-color: #dc2626; color: white; padding: 15px 30px; text-decoration: none; border-radius: 8px; font-size: 15px;">
                {label}
            </a>
        </div>
        <p>If the button doesn't work, you can copy and paste the following link into your browser:</p>
        <p style="word-break: break-all;"><a href="{url}">{url}</a></p>
    """

    @classmethod
    def _detail_rows(cls, content: EmailContent) -> list[tuple[str, str]]:
        details = content.event_details
        if details is None:
            return []
        rows = [
            ("Date", details.date),
            ("Time", details.time),
            ("Location", details.location),
            ("About This Event", details.event_description),
        ]
        return [(label, value) for label, value in rows if value]

    @classmethod
    def render_html(cls, subject: str, content: EmailContent) -> str:
        # subtitle is trusted markup built by the sender (bold host/event names)
        subtitle = cls.SUBTITLE_HTML.format(subtitle=content.subtitle) if content.subtitle else ""

        rows = cls._detail_rows(content)
        event_details = ""
        if rows:
            event_details = cls.DETAILS_HTML.format(
                rows="".join(
                    cls.DETAIL_ROW_HTML.format(label=label, value=escape(value))
                    for label, value in rows
                )
            )

        description = ""
        if content.description:
            description = cls.DESCRIPTION_HTML.format(description=escape(content.description))

        button = ""
        if content.button_label and content.button_url:
            button = cls.BUTTON_HTML.format(
                url=escape(content.button_url), label=escape(content.button_label)
            )

        return cls.HTML_LAYOUT.format(
            subject=escape(subject),
            title=escape(content.title),
            subtitle=subtitle,
            event_details=event_details,
            description=description,
            button=button,
            brand_name=cls.BRAND_NAME,
        )

    @classmethod
    def render_text(cls, content: EmailContent) -> str:
        lines = [content.title, ""]
        if content.subtitle:
            lines += [_strip_tags(content.subtitle), ""]
        rows = cls._detail_rows(content)
        if rows:
            lines += [f"- {label}: {value}" for label, value in rows]
            lines.append("")
        if content.description:
            lines += [content.description, ""]
        if content.button_label and content.button_url:
            lines += [f"{content.button_label}: {content.button_url}", ""]
        lines += ["Best regards,", f"The {cls.BRAND_NAME} Team"]
        return "\n".join(lines)


def _strip_tags(value: str) -> str:
    return unescape(value.replace("<strong>", "").replace("</strong>", ""))
