"""Outgoing email (voting codes) over Flask-Mail."""
from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from typing import Optional

from flask import current_app, render_template
from flask_mail import Mail, Message

logger = logging.getLogger(__name__)

SUBJECT = "Tu Código de Votación - {assembly}"


@dataclass(frozen=True)
class DeliveryResult:
    sent: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class ConnectionCheck:
    ok: bool
    message: Optional[str] = None
    error: Optional[str] = None


class ConfirmationMailer:
    def __init__(self, mail: Mail, *, app_url: str, assembly_name: str):
        self._mail = mail
        self._app_url = app_url.rstrip("/")
        self._assembly_name = assembly_name

    @staticmethod
    def is_configured() -> bool:
        cfg = current_app.config
        return bool(cfg.get("MAIL_USERNAME") and cfg.get("MAIL_PASSWORD"))

    def send_voting_code(self, *, to: str, name: str, code: str) -> DeliveryResult:
        if not self.is_configured():
            logger.info("[EMAIL] Mail not configured; would send voting code to %s", to)
            return DeliveryResult(sent=False, error="Configuración de email incompleta")

        context = {
            "name": name,
            "code": code,
            "voting_url": f"{self._app_url}/votacion",
            "assembly_name": self._assembly_name,
        }
        msg = Message(
            SUBJECT.format(assembly=self._assembly_name),
            recipients=[to],
        )
        msg.body = render_template("email/voting_code.txt", **context)
        msg.html = render_template("email/voting_code.html", **context)

        try:
            self._mail.send(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Error sending voting code to %s: %s", to, e)
            return DeliveryResult(sent=False, error=str(e))

        logger.info("Voting code sent to %s", to)
        return DeliveryResult(sent=True)

    def verify_connection(self) -> ConnectionCheck:
        cfg = current_app.config
        if not self.is_configured():
            return ConnectionCheck(
                ok=False,
                error=(
                    "Configuración de email incompleta.\n\n"
                    "Por favor configure MAIL_USERNAME y MAIL_PASSWORD en las variables de entorno."
                ),
            )
        try:
            with self._mail.connect():
                pass
        except (smtplib.SMTPException, OSError) as e:
            logger.warning("SMTP check failed: %s", e)
            return ConnectionCheck(ok=False, error=str(e) or "Error desconocido")

        return ConnectionCheck(
            ok=True,
            message=(
                "Conexión exitosa al servidor SMTP.\n\n"
                f"Servidor: {cfg.get('MAIL_SERVER')}:{cfg.get('MAIL_PORT')}\n"
                f"Usuario: {cfg.get('MAIL_USERNAME')}"
            ),
        )
