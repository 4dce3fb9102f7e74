"""
Muscle Reflex Circuit - proprioceptive feedback onto a muscle.

A reflex circuit reads muscle spindles (stretch length and speed) and golgi
tendon organs (tendon length) and turns them into excitation for the muscles
they sit on. It runs in one of two modes, chosen by which stages are wired:

DIRECT_GAIN (no interneuron, no delay)
    Every spindle/golgi pair contributes, with no latency,

        control = k_l * rect(stretch) / L_opt
                + k_v * rect(speed)   / (L_opt * V_max)
                + k_t * rect(tendon)  / L_slack

    where rect(x) = 0.5 * (|x| + x). The reflex is strictly excitatory and
    only answers lengthening. ``compute_controls`` ADDS each control to the
    pair muscle's slot of the shared controls vector, keeping whatever other
    controllers already put there.

INTERNEURON_DELAY (interneuron and delay both configured)
    One spindle and one golgi on the circuit's muscle feed

        [stretch, speed, tendon] → Interneuron → DelayLine → delayed signal

    The delayed signal is computed and stored, and read through
    ``get_muscle_signal``. It is NOT written into the controls vector, so a
    higher-level controller can compose it.

Lifecycle
=========
    circuit = ReflexCircuit("soleus_reflex", "soleus", config)
    circuit.connect_to_model(model)        # resolve + validate, may raise
    circuit.compute_controls(state, ctrl)  # first call starts the run
    ...
    circuit.reset_state()                  # end of run, rewiring allowed again

Sensor names are resolved once, in ``connect_to_model``. Rewiring while a run
is in progress raises ``ComponentError``; rewiring between runs requires
another ``connect_to_model``.
"""

from __future__ import annotations

import logging
import warnings
import weakref
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import torch

from myoreflex.components.interneuron import Interneuron
from myoreflex.components.muscle import Muscle
from myoreflex.components.sensors import GolgiTendon, SimpleSpindle
from myoreflex.config.circuit_config import GainSet, ReflexCircuitConfig
from myoreflex.constants import KIND_GOLGI, KIND_MUSCLE, KIND_SPINDLE, N_CIRCUIT_AFFERENTS
from myoreflex.core.protocols import Actuator, LengthSensor, ModelHost, TensionSensor
from myoreflex.core.state import SimulationState
from myoreflex.errors import (
    ComponentError,
    ConfigurationError,
    ReflexWiringWarning,
    validate_component_name,
)
from myoreflex.circuits.resolution import resolve_sensors
from myoreflex.managers.model_registry import ComponentHandle
from myoreflex.utils.delay_line import DelayLine
from myoreflex.utils.signal_utils import rectify

logger = logging.getLogger(__name__)


class CircuitMode(Enum):
    """Signal pipeline a circuit runs."""

    DIRECT_GAIN = "direct_gain"
    INTERNEURON_DELAY = "interneuron_delay"


@dataclass(frozen=True)
class SensorPair:
    """Spindle and golgi tendon organ on the same muscle."""

    spindle: ComponentHandle
    golgi: ComponentHandle


@dataclass
class _Connection:
    """Everything resolved by one ``connect_to_model`` pass."""

    model_ref: "weakref.ReferenceType[Any]"
    muscle: ComponentHandle
    spindles: List[ComponentHandle] = field(default_factory=list)
    golgis: List[ComponentHandle] = field(default_factory=list)
    pairs: List[SensorPair] = field(default_factory=list)


class ReflexCircuit:
    """Stretch/tendon reflex controller for one muscle.

    Args:
        name: Circuit name (must be non-empty)
        muscle: Muscle socket, as a muscle name or a ``Muscle`` instance
        config: Sensor lists, gains and optional interneuron/delay stages
    """

    def __init__(
        self,
        name: str,
        muscle: Union[str, Muscle, None] = None,
        config: Optional[ReflexCircuitConfig] = None,
    ):
        validate_component_name(name, "ReflexCircuit")
        config = config if config is not None else ReflexCircuitConfig()
        config.validate()

        self.name = name
        self._muscle_path: Optional[str] = muscle.name if isinstance(muscle, Muscle) else muscle

        # Private copy so add_spindle/add_golgi never edit the caller's lists
        self.config = replace(
            config,
            spindle_list=list(config.spindle_list),
            golgi_list=list(config.golgi_list),
            gains=replace(config.gains),
        )

        self.interneuron: Optional[Interneuron] = None
        self.delay_line: Optional[DelayLine] = None
        if self.config.uses_delayed_pipeline:
            self.mode = CircuitMode.INTERNEURON_DELAY
            self.interneuron = Interneuron(self.config.interneuron, name=f"{name}/interneuron")
            self.delay_line = DelayLine(self.config.delay, name=f"{name}/delay")
        else:
            self.mode = CircuitMode.DIRECT_GAIN

        self._connection: Optional[_Connection] = None
        self._running = False
        self._last_controls: List[float] = []
        self._delayed_signal: Optional[float] = None

    @classmethod
    def with_gains(
        cls,
        name: str,
        muscle: Union[str, Muscle],
        gain_length: float,
        gain_velocity: float,
        gain_tendon: float,
        spindle_list: Iterable[str] = ("ALL",),
        golgi_list: Iterable[str] = ("ALL",),
    ) -> ReflexCircuit:
        """Direct gain circuit bound to every spindle/golgi pair by default."""
        config = ReflexCircuitConfig(
            spindle_list=list(spindle_list),
            golgi_list=list(golgi_list),
            gains=GainSet(gain_length, gain_velocity, gain_tendon),
        )
        return cls(name, muscle, config)

    # =========================================================================
    # Configuration accessors
    # =========================================================================

    @property
    def gains(self) -> GainSet:
        return self.config.gains

    @property
    def spindle_list(self) -> List[str]:
        return list(self.config.spindle_list)

    @property
    def golgi_list(self) -> List[str]:
        return list(self.config.golgi_list)

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    @property
    def is_running(self) -> bool:
        return self._running

    # =========================================================================
    # Wiring
    # =========================================================================

    def set_spindles(self, spindles: Iterable[SimpleSpindle]) -> None:
        """Replace the declared spindles (takes effect on the next connect)."""
        self._check_rewirable("set_spindles")
        self.config.spindle_list = []
        self._connection = None
        for spindle in spindles:
            self.add_spindle(spindle)

    def add_spindle(self, spindle: SimpleSpindle) -> None:
        """Declare one more spindle (takes effect on the next connect)."""
        self._check_rewirable("add_spindle")
        if spindle.name not in self.config.spindle_list:
            self.config.spindle_list.append(spindle.name)
        self._connection = None

    def set_golgis(self, golgis: Iterable[GolgiTendon]) -> None:
        """Replace the declared golgi tendon organs (takes effect on the next connect)."""
        self._check_rewirable("set_golgis")
        self.config.golgi_list = []
        self._connection = None
        for golgi in golgis:
            self.add_golgi(golgi)

    def add_golgi(self, golgi: GolgiTendon) -> None:
        """Declare one more golgi tendon organ (takes effect on the next connect)."""
        self._check_rewirable("add_golgi")
        if golgi.name not in self.config.golgi_list:
            self.config.golgi_list.append(golgi.name)
        self._connection = None

    def connect_muscle(self, muscle: Union[str, Muscle]) -> None:
        """Point the muscle socket somewhere else (takes effect on the next connect)."""
        self._check_rewirable("connect_muscle")
        self._muscle_path = muscle.name if isinstance(muscle, Muscle) else muscle
        self._connection = None

    def connect_to_model(self, model: ModelHost) -> None:
        """Resolve sockets and sensor lists against ``model`` and finalize.

        Raises:
            ComponentError: If the circuit is running
            ConfigurationError: If the muscle socket is unconnected, a muscle
                has degenerate reference lengths, or the delayed pipeline is
                not wired to exactly one spindle and one golgi on its muscle

        Warns:
            SensorResolutionWarning: For each declared sensor not in the model
            ReflexWiringWarning: For each sensor left without a partner
        """
        self._check_rewirable("connect_to_model")
        self._connection = None

        if not getattr(model, "finalized", True):
            raise ConfigurationError(f"ReflexCircuit '{self.name}': model must be finalized before connecting")

        if not self._muscle_path:
            raise ConfigurationError(f"ReflexCircuit '{self.name}': muscle socket is not connected")
        muscle_handle = model.find_component(KIND_MUSCLE, self._muscle_path)
        if muscle_handle is None:
            raise ConfigurationError(
                f"ReflexCircuit '{self.name}': muscle '{self._muscle_path}' not found in model"
            )
        muscle = model.get(muscle_handle)
        muscle.validate()

        spindles = resolve_sensors(model, KIND_SPINDLE, self.config.spindle_list, owner=self.name)
        golgis = resolve_sensors(model, KIND_GOLGI, self.config.golgi_list, owner=self.name)

        if self.mode is CircuitMode.INTERNEURON_DELAY:
            self._check_delayed_wiring(model, muscle, spindles, golgis)
            pairs = [SensorPair(spindles[0], golgis[0])]
        else:
            pairs = self._pair_sensors(model, spindles, golgis)

        self._connection = _Connection(
            model_ref=weakref.ref(model),
            muscle=muscle_handle,
            spindles=spindles,
            golgis=golgis,
            pairs=pairs,
        )
        logger.info(
            "ReflexCircuit '%s' connected: mode=%s, muscle=%s, pairs=%d",
            self.name, self.mode.value, muscle.name, len(pairs),
        )

    def _pair_sensors(
        self,
        model: ModelHost,
        spindles: List[ComponentHandle],
        golgis: List[ComponentHandle],
    ) -> List[SensorPair]:
        """Pair spindle[i] with golgi[i], dropping unmatched entries."""
        pairs: List[SensorPair] = []
        for i in range(max(len(spindles), len(golgis))):
            if i >= len(golgis):
                self._warn_wiring(f"spindle '{model.get(spindles[i]).name}' has no matching golgi tendon")
                continue
            if i >= len(spindles):
                self._warn_wiring(f"golgi tendon '{model.get(golgis[i]).name}' has no matching spindle")
                continue

            spindle = model.get(spindles[i])
            golgi = model.get(golgis[i])
            if spindle.get_muscle() is not golgi.get_muscle():
                self._warn_wiring(
                    f"spindle '{spindle.name}' (muscle '{spindle.get_muscle().name}') and golgi "
                    f"tendon '{golgi.name}' (muscle '{golgi.get_muscle().name}') are on different muscles"
                )
                continue

            spindle.get_muscle().validate()
            pairs.append(SensorPair(spindles[i], golgis[i]))
        return pairs

    def _check_delayed_wiring(
        self,
        model: ModelHost,
        muscle: Muscle,
        spindles: List[ComponentHandle],
        golgis: List[ComponentHandle],
    ) -> None:
        if len(spindles) != 1 or len(golgis) != 1:
            raise ConfigurationError(
                f"ReflexCircuit '{self.name}': the interneuron pipeline needs exactly one spindle "
                f"and one golgi tendon, resolved {len(spindles)} and {len(golgis)}"
            )
        for handle in (spindles[0], golgis[0]):
            sensor = model.get(handle)
            if sensor.get_muscle() is not muscle:
                raise ConfigurationError(
                    f"ReflexCircuit '{self.name}': {handle.kind} '{sensor.name}' is attached to "
                    f"'{sensor.get_muscle().name}', not to the circuit muscle '{muscle.name}'"
                )
        self.interneuron.check_afferent_count(N_CIRCUIT_AFFERENTS)

    def _warn_wiring(self, message: str) -> None:
        message = f"{self.name}: {message}; pair ignored."
        logger.warning(message)
        warnings.warn(message, ReflexWiringWarning, stacklevel=3)

    def _check_rewirable(self, operation: str) -> None:
        if self._running:
            raise ComponentError(
                self.name,
                f"{operation} is not allowed while a simulation is running; call reset_state() first",
            )

    # =========================================================================
    # Resolved components
    # =========================================================================

    def _get_model(self) -> Any:
        if self._connection is None:
            raise ComponentError(self.name, "not connected; call connect_to_model() first")
        model = self._connection.model_ref()
        if model is None:
            raise ComponentError(self.name, "the model this circuit was connected to no longer exists")
        return model

    def get_muscle(self) -> Muscle:
        """Muscle connected to the circuit's muscle socket."""
        return self._get_model().get(self._connection.muscle)

    @property
    def spindle_set(self) -> List[SimpleSpindle]:
        model = self._get_model()
        return [model.get(handle) for handle in self._connection.spindles]

    @property
    def golgi_set(self) -> List[GolgiTendon]:
        model = self._get_model()
        return [model.get(handle) for handle in self._connection.golgis]

    @property
    def sensor_pairs(self) -> List[Tuple[SimpleSpindle, GolgiTendon]]:
        model = self._get_model()
        return [(model.get(pair.spindle), model.get(pair.golgi)) for pair in self._connection.pairs]

    # =========================================================================
    # Evaluation
    # =========================================================================

    def compute_reflex_control(
        self,
        spindle: LengthSensor,
        golgi: TensionSensor,
        state: SimulationState,
    ) -> float:
        """Direct gain control of one spindle/golgi pair.

        Any sensors satisfying the ``LengthSensor``/``TensionSensor``
        protocols work; the muscle they report must satisfy ``Actuator``.
        """
        gains = self.config.gains
        muscle: Actuator = spindle.get_muscle()

        stretch = spindle.get_spindle_length(state)
        speed = spindle.get_spindle_speed(state)
        tendon_length = golgi.get_tendon_length(state)

        max_speed = muscle.optimal_fiber_length * muscle.max_contraction_velocity

        control = gains.gain_length * rectify(stretch) / muscle.optimal_fiber_length
        control += gains.gain_velocity * rectify(speed) / max_speed
        control += gains.gain_tendon * rectify(tendon_length) / muscle.tendon_slack_length
        return control

    def compute_controls(self, state: SimulationState, controls: torch.Tensor) -> None:
        """Solver entry point, called once or more per integration step.

        In DIRECT_GAIN mode the reflex controls are added into ``controls``.
        In INTERNEURON_DELAY mode the delayed signal is computed and stored
        and ``controls`` is left untouched.
        """
        model = self._get_model()
        self._running = True

        if self.mode is CircuitMode.INTERNEURON_DELAY:
            self._evaluate_delayed(model, state)
            return

        last_controls = []
        for pair in self._connection.pairs:
            spindle = model.get(pair.spindle)
            control = self.compute_reflex_control(spindle, model.get(pair.golgi), state)
            spindle.get_muscle().add_in_controls(controls, control)
            last_controls.append(control)
        self._last_controls = last_controls

    def get_muscle_signal(self, state: SimulationState) -> float:
        """Evaluate the delayed pipeline at ``state`` and return its output.

        Raises:
            ComponentError: In DIRECT_GAIN mode, or before connecting
        """
        if self.mode is not CircuitMode.INTERNEURON_DELAY:
            raise ComponentError(
                self.name, "get_muscle_signal needs an interneuron and a delay; this circuit has neither"
            )
        model = self._get_model()
        self._running = True
        return self._evaluate_delayed(model, state)

    def get_delayed_signal(self) -> float:
        """Delayed signal stored by the last evaluation (default before any)."""
        if self._delayed_signal is None:
            return self.delay_line.default_signal if self.delay_line is not None else 0.0
        return self._delayed_signal

    def _evaluate_delayed(self, model: Any, state: SimulationState) -> float:
        pair = self._connection.pairs[0]
        spindle = model.get(pair.spindle)
        golgi = model.get(pair.golgi)

        afferents = [
            spindle.get_spindle_length(state),
            spindle.get_spindle_speed(state),
            golgi.get_tendon_length(state),
        ]
        signal = self.interneuron(afferents)
        self._delayed_signal = self.delay_line.evaluate(state.time, signal)
        return self._delayed_signal

    def prune_history(self, earliest_query_time: float) -> int:
        """Drop delay history no evaluation at or after the given time can use.

        Call once the solver has accepted every step up to that time.
        """
        if self.delay_line is None:
            return 0
        return self.delay_line.prune_before(earliest_query_time)

    # =========================================================================
    # State & diagnostics
    # =========================================================================

    def reset_state(self) -> None:
        """End the current run: clear delay history, allow rewiring."""
        self._running = False
        self._last_controls = []
        self._delayed_signal = None
        if self.interneuron is not None:
            self.interneuron.reset_state()
        if self.delay_line is not None:
            self.delay_line.reset_state()

    def get_diagnostics(self) -> Dict[str, Any]:
        diagnostics: Dict[str, Any] = {
            "name": self.name,
            "mode": self.mode.value,
            "connected": self.is_connected,
            "running": self._running,
            "n_pairs": len(self._connection.pairs) if self._connection is not None else 0,
        }
        if self.mode is CircuitMode.DIRECT_GAIN:
            diagnostics["last_controls"] = list(self._last_controls)
        else:
            diagnostics["delayed_signal"] = self.get_delayed_signal()
            diagnostics["interneuron"] = self.interneuron.get_diagnostics()
            diagnostics["delay"] = self.delay_line.get_diagnostics()
        return diagnostics

    def __repr__(self) -> str:
        return (
            f"ReflexCircuit(name={self.name!r}, muscle={self._muscle_path!r}, "
            f"mode={self.mode.value}, connected={self.is_connected})"
        )
