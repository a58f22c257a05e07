from .submission import Submission, DEFAULT_SERVICE
from .project import Project, to_dynamo
