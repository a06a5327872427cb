from html import escape


def signed_document_subject(document_name: str, client_name: str) -> str:
    return f"Signed document: {document_name} - {client_name}"


def signed_document_filename(document_name: str, client_name: str) -> str:
    return f"{document_name}_signed_{client_name}.pdf"


def signed_document_html(document_name: str, client_name: str, date_text: str) -> str:
    return f"""
      <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
        <h2>Signed document received</h2>
        <p><strong>Document:</strong> {escape(document_name)}</p>
        <p><strong>Client:</strong> {escape(client_name)}</p>
        <p><strong>Signed on:</strong> {escape(date_text)}</p>
        <hr style="margin: 20px 0;" />
        <p style="color: #666; font-size: 13px;">The signed document is attached. The signature is stamped directly onto the document.</p>
      </div>
    """


CHECK_MESSAGE_SUBJECT = "Test email - digital signature system"


def check_message_html(provider: str) -> str:
    return f"""
      <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
        <h2 style="color: #2563eb;">&#10003; Test email sent successfully</h2>
        <p>This is a test message from the digital signature system.</p>
        <p>Your settings work with <strong>{escape(provider)}</strong>.</p>
        <hr style="border:none;border-top:1px solid #eee;margin:24px 0;" />
        <p style="color:#888;font-size:12px;">This message was sent while checking the system settings.</p>
      </div>
    """


def signing_link_subject(document_name: str) -> str:
    return f"Document to sign: {document_name}"


def signing_link_html(document_name: str, link: str) -> str:
    href = escape(link, quote=True)
    return f"""
      <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
        <h2>Hello,</h2>
        <p>A document has been sent to you for signature: <strong>{escape(document_name)}</strong></p>
        <p>Use the button below to view and sign the document:</p>
        <div style="text-align: center; margin: 30px 0;">
          <a href="{href}" style="background-color: #2563eb; color: white; padding: 14px 28px; text-decoration: none; border-radius: 8px; font-size: 16px; font-weight: bold;">
            View and sign
          </a>
        </div>
        <p style="color: #666; font-size: 13px;">If the button does not work, copy this link into your browser:<br/>{href}</p>
      </div>
    """
