# Django project package for the wallet service: settings, settings_test,
# the admin URLconf and the ASGI/WSGI entry points.
