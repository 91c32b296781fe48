import os
import json
import logging
import requests

RED = 'ff0505'


def send_slack_alert(message, color=RED):
    """
    Send a message to a Slack channel.

    Does nothing when ``SLACK_WEBHOOK_URL`` is not set. Returns True when the alert was delivered.
    """
    webhook = os.getenv('SLACK_WEBHOOK_URL')
    if not webhook:
        return False
    body = {
        "attachments": [{
            "color": f"{color}",
            "blocks": [
                {
                    "type": "section",
                    "text": {
                        "type": "mrkdwn",
                        "text": f"*Calling all*: <!here>\n"
                                f"*Application*: {message['Application']}\n\n"
                                f"*Account*: {message['Account']}\n"
                                f"*Environment*: {message['Environment']}\n"
                                f"*Region*: {message['Region']}\n\n"
                                f"*Error Code*: {message['Error Code']}\n"
                                f"*Error Message*: {message['Error Message']}\n"
                                f"*Issue*: {message['Issue']}"
                    }
                }
            ]
        }]
    }
    try:
        response = requests.post(webhook, data=json.dumps(body),
                                 headers={'Content-Type': 'application/json'}, timeout=10)
    except requests.RequestException as e:
        logging.warning(f"Could not send slack alert: {e}")
        return False
    if response.status_code != 200:
        logging.warning(f"Could not send slack alert: {response.content}")
        return False
    return True
