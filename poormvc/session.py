"""PoorSession self-contained cookie class and request session accessor.

:Classes: PoorSession, Session
:Exceptions: SessionError

This module is depended to pyaes https://pypi.org/project/pyaes/
"""
import hmac
from base64 import urlsafe_b64decode, urlsafe_b64encode
from hashlib import sha256, sha3_256
from http.cookies import SimpleCookie
from json import dumps, loads
from logging import getLogger
from typing import Any, Dict, Optional, Union

from pyaes import AESModeOfOperationCTR  # type: ignore

from poormvc.headers import Headers
from poormvc.response import BaseResponse

log = getLogger("poormvc")  # pylint: disable=invalid-name

# pylint: disable=too-many-arguments
# pylint: disable=too-many-instance-attributes
# pylint: disable=unsubscriptable-object


class SessionError(RuntimeError):
    """Base Exception for Session"""


class PoorSession:
    """Self-contained cookie with session data.

    Data is stored to cookie by json dump, and next encrypted by AES CTR
    method with ``secret_key``. Session data are signed just like JWT.

    .. code:: python

        sess = PoorSession(app.secret_key)
        sess.load(req.cookies)
        sess.data['user_id'] = 42
        sess.header(response)
    """

    def __init__(self,
                 secret_key: Union[str, bytes],
                 expires: int = 0,
                 max_age: Optional[int] = None,
                 domain: str = '',
                 path: str = '/',
                 secure: bool = False,
                 same_site: Union[bool, str] = False,
                 sid: str = 'SESSID'):
        """Constructor.

        Arguments:
            expires : int
                Cookie ``Expires`` time in seconds, if it 0, no expire is set
            max_age : int
                Cookie ``Max-Age`` attribute. If both expires and max-age are
                set, max_age has precedence.
            domain : str
                Cookie ``Host`` to which the cookie will be sent.
            path : str
                Cookie ``Path`` that must exist in the requested URL.
            secure : bool
                If ``Secure`` cookie attribute will be sent.
            same_site: str
                The ``SameSite`` attribute, one of ``Strict|Lax|None``.
            sid : str
                Cookie key name.
        """
        if not secret_key:
            raise SessionError("Empty secret_key")
        if isinstance(secret_key, str):
            secret_key = secret_key.encode('utf-8')

        self.__secret_key = sha3_256(secret_key).digest()
        self.__sid = sid
        self.__expires = expires
        self.__max_age = max_age
        self.__domain = domain
        self.__path = path
        self.__secure = secure
        self.__same_site = same_site

        # data is session dictionary to store user data in cookie
        self.data: Dict[Any, Any] = {}
        self.cookie: SimpleCookie = SimpleCookie()
        self.cookie[sid] = ''

    @property
    def sid(self):
        """Cookie key name."""
        return self.__sid

    def load(self, cookies: Optional[SimpleCookie]):
        """Load session from request's cookie"""
        if not isinstance(cookies, SimpleCookie) or self.__sid not in cookies:
            return
        raw = cookies[self.__sid].value

        if not raw:
            return

        try:
            payload, signature = raw.encode('utf-8').split(b'.')
            payload = urlsafe_b64decode(payload)
            signature = urlsafe_b64decode(signature)

            digest = hmac.digest(self.__secret_key, payload, digest=sha256)
            if not hmac.compare_digest(digest, signature):
                raise RuntimeError("Invalid Signature")

            aes = AESModeOfOperationCTR(self.__secret_key)
            self.data = loads(aes.decrypt(payload).decode('utf-8'))

        except Exception as err:
            log.info(repr(err))
            raise SessionError("Bad session data.") from err

        if not isinstance(self.data, dict):
            self.data = {}
            raise SessionError("Cookie data is not dictionary!")

    def write(self):
        """Store data to cookie value.

        This method is called automatically in header method.
        """
        aes = AESModeOfOperationCTR(self.__secret_key)
        payload = aes.encrypt(dumps(self.data))
        digest = hmac.digest(self.__secret_key, payload, digest=sha256)
        raw = urlsafe_b64encode(payload) + b'.' + urlsafe_b64encode(digest)

        morsel_name = self.__sid
        self.cookie[morsel_name] = raw.decode('utf-8')
        morsel = self.cookie[morsel_name]
        morsel['HttpOnly'] = True

        if self.__domain:
            morsel['Domain'] = self.__domain
        if self.__path:
            morsel['path'] = self.__path
        if self.__secure:
            morsel['Secure'] = True
        if self.__same_site:
            morsel['SameSite'] = self.__same_site
        if self.__expires:
            morsel['expires'] = self.__expires
        if self.__max_age is not None:
            morsel['Max-Age'] = self.__max_age

        return raw

    def destroy(self):
        """Destroy session. In fact, set cookie expires value to past (-1)."""
        self.data = {}
        morsel = self.cookie[self.__sid]
        morsel['expires'] = -1
        if self.__max_age is not None:
            morsel['Max-Age'] = -1
        morsel['HttpOnly'] = True
        if self.__secure:
            morsel['Secure'] = True

    def header(self, headers: Optional[Union[Headers, BaseResponse]] = None):
        """Generate cookie headers and append it to headers if it set.

        Returns list of cookie header pairs.
        """
        self.write()
        retval = []
        for cookie in self.cookie.output().split('\r\n'):
            var = cookie[:10]  # Set-Cookie
            val = cookie[12:]  # SID=###; expires=###; Path=/
            retval.append((var, val))
            if headers is not None:
                headers.add_header(var, val)
        return retval


class Session:
    """Request session accessor.

    Cookie is loaded when the accessor is created. Invalid cookie is only
    logged, and empty session is used. Cookie header is sent only when
    session was changed or destroyed.

    .. code:: python

        req.session.set('user_id', 42)
        req.session.get('user_id')      # 42
        req.session.delete('user_id')
    """

    def __init__(self, secret_key: Union[str, bytes],
                 cookies: Optional[SimpleCookie] = None, **kwargs):
        self.__cookie = PoorSession(secret_key, **kwargs)
        try:
            self.__cookie.load(cookies)
        except SessionError as err:
            log.warning("Invalid session cookie: %s", err)
        self.__modified = False
        self.__destroyed = False

    @property
    def modified(self):
        """True if session data was changed."""
        return self.__modified

    @property
    def destroyed(self):
        return self.__destroyed

    @property
    def data(self):
        """Copy of session data."""
        return self.__cookie.data.copy()

    def get(self, key: str, default=None):
        return self.__cookie.data.get(key, default)

    def set(self, key: str, value):
        """Store json serializable value to session."""
        self.__cookie.data[key] = value
        self.__modified = True

    def delete(self, key: str):
        """Remove key from session, missing key is ignored."""
        if key in self.__cookie.data:
            del self.__cookie.data[key]
            self.__modified = True

    def destroy(self):
        """Clear session and expire cookie in browser."""
        self.__cookie.destroy()
        self.__destroyed = True

    def __contains__(self, key):
        return key in self.__cookie.data

    def header(self, headers: Optional[Union[Headers, BaseResponse]] = None):
        """Append Set-Cookie header, if session was changed or destroyed."""
        if not (self.__modified or self.__destroyed):
            return []
        return self.__cookie.header(headers)
