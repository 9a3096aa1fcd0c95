"""
Minimal server-rendered gate pages.

Each gate shows a countdown and the ad containers the page-side loader
fills (#ad-banner, #social-bar). Gates 1 and 2 link to the next step once
the countdown ends; gate 3 shows the CAPTCHA widget and posts the token
to /verify/{short_id}.
"""

from html import escape

from gatelink_app.config import settings
from gatelink_app.services.gate_service import GateStep, GateView


_LAYOUT = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{title}</title>
{head}
</head>
<body>
<main class="gate gate-{step}">
{body}
</main>
</body>
</html>
"""

_ADS = """<div id="ad-banner" class="ad-slot"></div>
<div id="social-bar" class="ad-slot"></div>"""

_TIMED_BODY = """<h1>Step {number} of 3</h1>
{ads}
<p>Please wait <span id="countdown">{delay}</span> seconds.</p>
<a id="next" class="btn btn-primary" href="{next_url}" hidden>Continue</a>
<script>
(function(){{
  var left = {delay};
  var el = document.getElementById('countdown');
  var timer = setInterval(function(){{
    left -= 1;
    el.textContent = left;
    if (left <= 0) {{
      clearInterval(timer);
      document.getElementById('next').hidden = false;
    }}
  }}, 1000);
}})();
</script>"""

_CAPTCHA_BODY = """<h1>Step 3 of 3</h1>
{ads}
<p>Please wait <span id="countdown">{delay}</span> seconds, then confirm you are human.</p>
<form id="verify-form" hidden>
  <div class="g-recaptcha" data-sitekey="{site_key}"></div>
  <button type="submit" class="btn btn-primary">Get Link</button>
  <p id="verify-error" class="error" hidden></p>
</form>
<script>
(function(){{
  var left = {delay};
  var el = document.getElementById('countdown');
  var form = document.getElementById('verify-form');
  var timer = setInterval(function(){{
    left -= 1;
    el.textContent = left;
    if (left <= 0) {{ clearInterval(timer); form.hidden = false; }}
  }}, 1000);
  form.addEventListener('submit', function(e){{
    e.preventDefault();
    fetch('/verify/{short_id}', {{
      method: 'POST',
      headers: {{'Content-Type': 'application/json'}},
      body: JSON.stringify({{captchaToken: grecaptcha.getResponse()}})
    }}).then(function(r){{ return r.json(); }}).then(function(data){{
      if (data.success) {{ window.location.href = data.redirectUrl; return; }}
      var err = document.getElementById('verify-error');
      err.textContent = data.error || 'Verification failed';
      err.hidden = false;
      grecaptcha.reset();
    }});
  }});
}})();
</script>"""

_NOT_FOUND_BODY = """<h1>Link not found</h1>
<p>This short link does not exist or has been mistyped.</p>"""

_STEP_NUMBERS = {GateStep.GATE1: 1, GateStep.GATE2: 2, GateStep.GATE3: 3}


def render_gate(view: GateView) -> str:
    if view.step == GateStep.GATE3:
        head = '<script src="https://www.google.com/recaptcha/api.js" async defer></script>'
        body = _CAPTCHA_BODY.format(
            ads=_ADS,
            delay=view.delay_seconds,
            site_key=escape(view.site_key or ""),
            short_id=escape(view.short_id),
        )
    else:
        head = ""
        body = _TIMED_BODY.format(
            number=_STEP_NUMBERS[view.step],
            ads=_ADS,
            delay=view.delay_seconds,
            next_url=escape(view.next_url or ""),
        )
    return _LAYOUT.format(
        title=escape(settings.app_name),
        head=head,
        step=view.step.value,
        body=body,
    )


def render_not_found() -> str:
    return _LAYOUT.format(
        title=f"Not found - {escape(settings.app_name)}",
        head="",
        step="404",
        body=_NOT_FOUND_BODY,
    )
