"""Message templates.

HTML bodies are Jinja2 sources. Every ``{{ ... }}`` expression is passed
through ``sanitizer.escape`` by the renderer, so values are written here
without filters. SMS bodies use the literal ``{{customerName}}`` style
placeholders understood by ``renderer.substitute_placeholders``.
"""

from revboost_notifier.enums import NotificationKind

EMAIL_SUBJECTS: dict[NotificationKind, str] = {
    NotificationKind.REVIEW_REQUEST: "We'd love to hear your feedback on {business_name}",
    NotificationKind.TEST: "RevBoost Email Test",
    NotificationKind.FEEDBACK_ALERT: "⚠️ Negative Review Blocked - Customer Feedback",
}

DEFAULT_BUTTON_TEXT = "Leave a Review"

_BASE_STYLE = """
    body {
      font-family: 'Inter', -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Helvetica, Arial, sans-serif;
      line-height: 1.6;
      color: #374151;
      background-color: #f3f4f6;
      margin: 0;
      padding: 0;
    }
    .container { max-width: 600px; margin: 0 auto; padding: 20px; background-color: #ffffff; }
    .header { text-align: center; padding: 20px 0; border-bottom: 1px solid #e5e7eb; }
    .header h2 { margin: 0; font-size: 24px; font-weight: 700; }
    .content { padding: 24px 20px; }
    .footer {
      text-align: center;
      margin-top: 20px;
      padding-top: 20px;
      border-top: 1px solid #e5e7eb;
      font-size: 12px;
      color: #6b7280;
    }
    @media only screen and (max-width: 480px) {
      .container { padding: 10px; }
      .content { padding: 20px 15px; }
    }
"""

REVIEW_REQUEST_HTML = (
    """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>We'd Love Your Feedback</title>
  <style>"""
    + _BASE_STYLE
    + """    .header h2 { color: #1e3a8a; }
    .button-container { text-align: center; margin: 30px 0; }
    .button {
      display: inline-block;
      padding: 12px 24px;
      background-color: #2563eb;
      color: white !important;
      text-decoration: none;
      border-radius: 6px;
      font-weight: 600;
      font-size: 16px;
    }
  </style>
</head>
<body>
  <div class="container">
    <div class="header">
      <h2>We'd Love Your Feedback!</h2>
    </div>
    <div class="content">
      <p>Hello {{ customer_name }},</p>
      <p>Thank you for choosing {{ business_name }}. We hope you had a great experience!</p>
      <p>We value your feedback and would appreciate it if you could take a moment to share your experience with us.</p>
      <div class="button-container">
        <a href="{{ review_link }}" class="button">{{ button_text }}</a>
      </div>
      <p>Your feedback helps us improve and better serve our customers.</p>
      <p>Thank you for your time!</p>
      <p>
        Best regards,<br>
        The {{ business_name }} Team
      </p>
    </div>
    <div class="footer">
      <p>This email was sent to you because you interacted with {{ business_name }}.</p>
      <p>&copy; {{ year }} {{ business_name }}. All rights reserved.</p>
    </div>
  </div>
</body>
</html>
"""
)

TEST_HTML = (
    """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>RevBoost Email Test</title>
  <style>"""
    + _BASE_STYLE
    + """    .header h2 { color: #1e3a8a; }
  </style>
</head>
<body>
  <div class="container">
    <div class="header">
      <h2>RevBoost Email Test</h2>
    </div>
    <div class="content">
      <p>This is a test email from RevBoost.</p>
      <p>If you received this email, it means that email sending is working properly!</p>
      <p>You can now use the email service to send review requests to your customers.</p>
      <hr>
      <p>Details:</p>
      <ul>
        <li>Sent: {{ sent_at }}</li>
        <li>Email Service: Resend</li>
      </ul>
    </div>
    <div class="footer">
      <p>&copy; {{ year }} RevBoost. This is an automated test message.</p>
    </div>
  </div>
</body>
</html>
"""
)

FEEDBACK_ALERT_HTML = (
    """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Customer Feedback Alert</title>
  <style>"""
    + _BASE_STYLE
    + """    .header h2 { color: #991b1b; }
    .rating { font-size: 24px; color: #f59e0b; margin: 15px 0; }
    .feedback-box {
      background-color: #f9fafb;
      border: 1px solid #e5e7eb;
      border-radius: 6px;
      padding: 15px;
      margin: 20px 0;
    }
  </style>
</head>
<body>
  <div class="container">
    <div class="header">
      <h2>Customer Feedback Alert</h2>
    </div>
    <div class="content">
      <p>Hello {{ business_name }} Team,</p>
      <p>A customer has left feedback that was <strong>not published publicly</strong>. This feedback has been blocked from appearing on review sites.</p>
      <p><strong>Customer:</strong> {{ customer_name }}</p>
      <div class="rating">
        <strong>Rating:</strong> {{ stars }} ({{ rating }}/5)
      </div>
      <p><strong>Customer Feedback:</strong></p>
      <div class="feedback-box">
        {{ feedback }}
      </div>
{%- if review_link %}
      <p><a href="{{ review_link }}">View this feedback</a></p>
{%- endif %}
      <p>This feedback was captured by RevBoost to protect your online reputation. We recommend addressing this feedback directly with the customer.</p>
      <p>
        Best regards,<br>
        RevBoost Team
      </p>
    </div>
    <div class="footer">
      <p>This is an automated notification from RevBoost.</p>
      <p>&copy; {{ year }} RevBoost. All rights reserved.</p>
    </div>
  </div>
</body>
</html>
"""
)

EMAIL_BODIES: dict[NotificationKind, str] = {
    NotificationKind.REVIEW_REQUEST: REVIEW_REQUEST_HTML,
    NotificationKind.TEST: TEST_HTML,
    NotificationKind.FEEDBACK_ALERT: FEEDBACK_ALERT_HTML,
}

DEFAULT_SMS_REVIEW_REQUEST = (
    "Hi {{customerName}}, thank you for choosing {{businessName}}! "
    "We'd love to hear your feedback. Please share your experience here: "
    "{{reviewLink}}"
)

SMS_TEST_BODY = (
    "This is a test message from RevBoost. "
    "If you received this, SMS sending is working properly!"
)
