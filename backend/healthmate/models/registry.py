# Import every model so Base.metadata is complete (alembic, create_all).
from healthmate.models.user import User  # noqa: F401
from healthmate.models.conversation import Conversation  # noqa: F401
from healthmate.models.chat_message import ChatMessage  # noqa: F401
from healthmate.models.doctor import Doctor, DoctorContactAccessLog  # noqa: F401
from healthmate.models.appointment import Appointment  # noqa: F401
from healthmate.models.emergency_contact import EmergencyContact  # noqa: F401
from healthmate.models.disease_outbreak import DiseaseOutbreak  # noqa: F401
