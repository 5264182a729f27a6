from duelytics.models.session import DuelSession
from duelytics.models.ladder_tier import LadderTier
from duelytics.models.session_participant import SessionParticipant
from duelytics.models.player_session_stats import PlayerSessionStats
from duelytics.models.deck import Deck
from duelytics.models.duel import Duel
from duelytics.models.audit_log import AuditLog
