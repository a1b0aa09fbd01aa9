"""
Notification Service
Relays text notifications to users over the WhatsApp bot webhook
"""

import requests
from flask import current_app


class NotificationService:
    """WhatsApp relay client; delivery failures are reported, never raised"""
    
    SOURCE = 'konecte-web'
    
    def __init__(self, relay_url, token=None, timeout=5.0, enabled=True):
        self.relay_url = relay_url
        self.token = token
        self.timeout = timeout
        self.enabled = enabled
    
    @classmethod
    def from_config(cls, config=None):
        config = config if config is not None else current_app.config
        return cls(
            relay_url=config.get('WHATSAPP_RELAY_URL'),
            token=config.get('WHATSAPP_RELAY_TOKEN'),
            timeout=config.get('WHATSAPP_RELAY_TIMEOUT', 5.0),
            enabled=config.get('MATCH_NOTIFICATIONS_ENABLED', True),
        )
    
    def _headers(self):
        headers = {'Content-Type': 'application/json'}
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'
        return headers
    
    def send_text(self, phone_number, text, context_user_id=None):
        """
        Send a text message to a phone number through the relay
        
        Returns:
            True if the relay accepted the message, False otherwise
        """
        if not self.enabled or not self.relay_url:
            current_app.logger.info('WhatsApp relay disabled, skipping notification')
            return False
        
        if not phone_number:
            return False
        
        payload = {
            'source': self.SOURCE,
            'phoneNumber': phone_number,
            'messageText': text,
            'userId': context_user_id,
        }
        
        try:
            response = requests.post(
                self.relay_url,
                json=payload,
                headers=self._headers(),
                timeout=self.timeout
            )
            response.raise_for_status()
            return True
        except requests.exceptions.RequestException as e:
            current_app.logger.warning(f'WhatsApp relay failed for user {context_user_id}: {str(e)}')
            return False
