#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Email delivery of the closing report with inline chart images
"""

import io
import logging
import os
import smtplib
from datetime import datetime
from email.mime.image import MIMEImage
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from PIL import Image

MAX_IMAGE_WIDTH = 900


def prepare_inline_image(path, max_width=MAX_IMAGE_WIDTH):
    """Return PNG bytes of the image, shrunk to max_width if wider"""
    with Image.open(path) as img:
        if img.width > max_width:
            height = round(img.height * max_width / img.width)
            img = img.resize((max_width, height), Image.LANCZOS)
        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
    return buffer.getvalue()


def format_subject(template, when=None):
    """Fill '{date}' in a subject template; other placeholders raise KeyError"""
    when = when or datetime.now()
    return template.format(date=when.strftime('%Y-%m-%d'))


class EmailSender:
    """Handles email delivery of reports"""

    def __init__(self, settings):
        self.settings = settings

    def build_message(self, html_body, images=None):
        """
        images: mapping of content id to PNG path. The HTML refers to each
        one as 'cid:<content id>'.
        """
        msg = MIMEMultipart('related')
        msg['Subject'] = format_subject(self.settings.subject)
        msg['From'] = self.settings.sender
        msg['To'] = ', '.join(self.settings.recipients)

        alternative = MIMEMultipart('alternative')
        alternative.attach(MIMEText("Please view this email in an HTML-capable client.", 'plain'))
        alternative.attach(MIMEText(html_body, 'html'))
        msg.attach(alternative)

        for content_id, path in (images or {}).items():
            if not os.path.exists(path):
                logging.warning(f"Chart image missing, not embedding: {path}")
                continue
            part = MIMEImage(prepare_inline_image(path), _subtype='png')
            part.add_header('Content-ID', f"<{content_id}>")
            part.add_header('Content-Disposition', 'inline', filename=os.path.basename(path))
            msg.attach(part)

        return msg

    def send_report(self, html_body, images=None):
        """Send the report via email"""
        if not self.settings.recipients:
            logging.warning("No email recipients configured")
            return False

        try:
            msg = self.build_message(html_body, images)
        except (KeyError, IndexError, ValueError) as e:
            logging.error(f"Unable to build email, check the subject template: {e!r}")
            return False

        try:
            with smtplib.SMTP(self.settings.smtp_server, self.settings.smtp_port) as server:
                if self.settings.use_tls:
                    server.starttls()
                if self.settings.username and self.settings.password:
                    server.login(self.settings.username, self.settings.password)
                server.sendmail(self.settings.sender, self.settings.recipients, msg.as_string())

            logging.info(f"Report emailed to: {', '.join(self.settings.recipients)}")
            return True

        except (smtplib.SMTPException, OSError) as e:
            logging.error(f"Failed to send email: {e}")
            return False
