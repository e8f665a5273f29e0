# xml-ingestor/src/xml_ingestor/slack.py
from __future__ import annotations

from typing import Any, Dict

import requests

from .config import settings
from .logging_cfg import get_logger, redact

log = get_logger(__name__)


class SlackClient:
    def error(self, code: str, ctx: Dict[str, Any]) -> None:
        """Sanitized failure notification. Never raises."""
        if not settings.SLACK_WEBHOOK_URL:
            return
        msg = {
            "text": f"XML ingest error: {code}",
            "blocks": [
                {
                    "type": "section",
                    "text": {
                        "type": "mrkdwn",
                        "text": f"*Error:* `{code}`\n*Bucket:* `{ctx.get('container','')}`\n*Key:* `{ctx.get('key','')}`\n*Info:* `{redact(str(ctx.get('message',''))[:300])}`",
                    },
                }
            ],
        }
        try:
            requests.post(str(settings.SLACK_WEBHOOK_URL), json=msg, timeout=5)
        except requests.RequestException as e:
            log.warning(f"slack post failed: {e}")
