"""Support library for integrity tests."""
from sys import executable
from time import sleep
from subprocess import Popen
from socket import socket, error as SocketError

from requests import Request, Session
from requests.exceptions import RequestException


def start_server(request, example):
    """Start web server with example."""

    process = None
    print("Starting wsgi application...")
    if request.config.getoption("--with-uwsgi"):
        process = Popen(["uwsgi", "--plugin", "python3",
                         "--http-socket", "localhost:8080", "--wsgi-file",
                         example])
    else:
        # pylint: disable=consider-using-with
        process = Popen([executable, example])

    assert process is not None
    connect = False
    for i in range(100):  # pylint: disable=unused-variable
        sck = socket()
        try:
            sck.connect(("localhost", 8080))
            connect = True
            break
        except SocketError:
            sleep(0.1)
        finally:
            sck.close()
    if not connect:
        process.kill()
        process.wait()
        raise RuntimeError("Server not started in 10 seconds")

    return process


def check_url(url, method="GET", status_code=200, allow_redirects=True,
              **kwargs):
    """Do HTTP request and check status_code."""
    session = kwargs.pop("session", None)
    timeout = kwargs.pop("timeout", None)
    if not session:     # session is not created for nothing
        session = Session()
    try:
        request = Request(method, url, cookies=session.cookies, **kwargs)
        response = session.send(request.prepare(),
                                allow_redirects=allow_redirects,
                                timeout=timeout)
        if isinstance(status_code, int):
            status_code = [status_code]
        assert response.status_code in status_code, \
               response.text or response.reason
        return response
    except RequestException:
        pass
    raise ConnectionError("Not response")
