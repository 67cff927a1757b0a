"""
Crosspreview, SwiftUI previews without Xcode

Extracts the view tree of a SwiftUI `View` declaration from source text and
renders it as HTML for a quick visual preview.
"""

__version__ = "0.1.0"


from ._error import *
from ._view import *
from ._config import *
from ._comments import *
from ._values import *
from ._syntax import *
from ._modifiers import *
from ._extract import *
from ._translate import *
from ._fallback import *
from ._backend import *
from ._style import *
from ._render import *
from ._document import *
