"""
Unit tests for distance estimation.

Tests segmented path-loss models, the generic clamped model, signal and
proximity helpers, and path-loss exponent calibration.
"""

import pytest

from proxitrack.tracking import distance
from proxitrack.tracking.constants import (
    UNKNOWN_DISTANCE,
    PathLossBucket,
)
from proxitrack.tracking.distance import (
    DistanceEstimator,
    estimate,
    estimate_ble_simple,
    estimate_path_loss_exponent,
    estimate_wifi_simple,
    fit_path_loss,
    get_distance_estimator,
    path_loss_distance,
)
from proxitrack.tracking.models import DeviceClass, TrackedDevice
from proxitrack.tracking.proximity import (
    ProximityCategory,
    proximity_category,
    proximity_level,
    signal_bars,
    signal_percent,
    signal_quality,
)


class TestSegmentedEstimator:
    """Tests for the per-class segmented path-loss model."""

    @pytest.fixture
    def estimator(self):
        """Create an estimator with the default tables."""
        return DistanceEstimator()

    def test_bluetooth_close_bucket_at_reference(self, estimator):
        """-59 dBm Bluetooth uses (-59, 2.0) and lands at 1 meter."""
        assert estimator.estimate(-59, DeviceClass.BLUETOOTH) == pytest.approx(1.0)

    def test_bluetooth_near_field_fixed(self, estimator):
        """Readings at or above -35 dBm are pinned to 0.3m."""
        assert estimator.estimate(-35, DeviceClass.BLUETOOTH) == 0.3
        assert estimator.estimate(-10, DeviceClass.BLUETOOTH) == 0.3

    def test_bluetooth_medium_and_far_buckets(self, estimator):
        """Medium and far buckets use their own parameters."""
        # medium: tx -62, n 2.5
        assert estimator.estimate(-62, DeviceClass.BLUETOOTH) == pytest.approx(1.0)
        assert estimator.estimate(-75, DeviceClass.BLUETOOTH) == pytest.approx(10 ** (13 / 25))
        # far: tx -65, n 3.2
        assert estimator.estimate(-76, DeviceClass.BLUETOOTH) == pytest.approx(10 ** (11 / 32))
        assert estimator.estimate(-85, DeviceClass.BLUETOOTH) == pytest.approx(10 ** (20 / 32))

    def test_wifi_buckets(self, estimator):
        """WiFi table boundaries select the documented parameters."""
        assert estimator.estimate(-30, DeviceClass.WIFI_AP) == 0.5
        assert estimator.estimate(-40, DeviceClass.WIFI_AP) == pytest.approx(1.0)
        assert estimator.estimate(-50, DeviceClass.WIFI_AP) == pytest.approx(10 ** (10 / 22))
        assert estimator.estimate(-60, DeviceClass.WIFI_AP) == pytest.approx(10 ** (15 / 27))
        assert estimator.estimate(-80, DeviceClass.WIFI_AP) == pytest.approx(10 ** (30 / 35))

    def test_wifi_client_shares_wifi_table(self, estimator):
        """WiFi clients use the access point table."""
        for rssi in (-25, -45, -65, -90):
            assert estimator.estimate(rssi, DeviceClass.WIFI_CLIENT) == \
                estimator.estimate(rssi, DeviceClass.WIFI_AP)

    @pytest.mark.parametrize("device_class", list(DeviceClass))
    def test_zero_rssi_is_unknown(self, estimator, device_class):
        """RSSI of exactly 0 yields the unknown sentinel for every class."""
        assert estimator.estimate(0, device_class) == UNKNOWN_DISTANCE

    def test_no_clamping_in_segmented_model(self, estimator):
        """Very weak readings are not clamped to -100 dBm."""
        clamped = 10 ** ((-65 + 100) / 32)
        unclamped = 10 ** ((-65 + 120) / 32)
        assert estimator.estimate(-120, DeviceClass.BLUETOOTH) == pytest.approx(unclamped)
        assert estimator.estimate(-120, DeviceClass.BLUETOOTH) != pytest.approx(clamped)

    def test_custom_tables(self):
        """Alternate tables can be supplied."""
        estimator = DistanceEstimator(
            bluetooth_buckets=(PathLossBucket(min_rssi=None, tx_power=-70, exponent=2.0),),
        )
        assert estimator.estimate(-70, DeviceClass.BLUETOOTH) == pytest.approx(1.0)

    def test_table_without_catch_all(self):
        """A reading below every bucket is unknown."""
        estimator = DistanceEstimator(
            wifi_buckets=(PathLossBucket(min_rssi=-50, tx_power=-40, exponent=2.0),),
        )
        assert estimator.estimate(-80, DeviceClass.WIFI_AP) == UNKNOWN_DISTANCE

    def test_module_level_estimate_uses_default(self):
        """estimate() delegates to the shared default estimator."""
        assert get_distance_estimator() is get_distance_estimator()
        assert estimate(-59, DeviceClass.BLUETOOTH) == pytest.approx(1.0)
        assert estimate(0, DeviceClass.WIFI_AP) == UNKNOWN_DISTANCE


class TestGenericModel:
    """Tests for the single-bucket clamped model."""

    def test_reference_distance(self):
        """At tx_power the distance is 1 meter."""
        assert path_loss_distance(-59) == pytest.approx(1.0)
        assert path_loss_distance(-69, tx_power=-59, exponent=1.0) == pytest.approx(10.0)

    def test_zero_rssi_is_unknown(self):
        assert path_loss_distance(0) == UNKNOWN_DISTANCE

    def test_clamps_weak_readings(self):
        """Readings below -100 dBm are treated as -100 dBm."""
        assert path_loss_distance(-130) == pytest.approx(path_loss_distance(-100))

    def test_clamps_positive_readings(self):
        """Positive readings are treated as -1 dBm."""
        assert path_loss_distance(7) == pytest.approx(path_loss_distance(-1))

    def test_legacy_helpers(self):
        """Legacy single-bucket helpers use their fixed parameters."""
        assert estimate_wifi_simple(-50) == pytest.approx(1.0)
        assert estimate_wifi_simple(-75) == pytest.approx(10.0)
        assert estimate_ble_simple(-59) == pytest.approx(1.0)
        assert estimate_ble_simple(-79) == pytest.approx(10.0)


class TestSignalHelpers:
    """Tests for signal quality, percentage and bars."""

    @pytest.mark.parametrize("rssi,label", [
        (-30, "Excellent"),
        (-50, "Excellent"),
        (-51, "Good"),
        (-60, "Good"),
        (-70, "Fair"),
        (-80, "Weak"),
        (-81, "Very Weak"),
    ])
    def test_signal_quality(self, rssi, label):
        assert signal_quality(rssi) == label

    def test_signal_percent_endpoints(self):
        """-30 dBm and above is 100%, -90 dBm and below is 0%."""
        assert signal_percent(-30) == 100
        assert signal_percent(-10) == 100
        assert signal_percent(-90) == 0
        assert signal_percent(-100) == 0

    def test_signal_percent_linear(self):
        """Between the endpoints the mapping is linear."""
        assert signal_percent(-60) == 50
        assert signal_percent(-45) == 75
        assert signal_percent(-75) == 25

    @pytest.mark.parametrize("rssi,bars", [
        (-40, 5),
        (-50, 5),
        (-55, 4),
        (-65, 3),
        (-75, 2),
        (-85, 1),
        (-90, 1),
        (-91, 0),
    ])
    def test_signal_bars(self, rssi, bars):
        assert signal_bars(rssi) == bars


class TestProximity:
    """Tests for proximity classification from distance."""

    def test_categories(self):
        assert proximity_category(-1.0) == ProximityCategory.UNKNOWN
        assert proximity_category(0.5) == ProximityCategory.IMMEDIATE
        assert proximity_category(1.0) == ProximityCategory.NEAR
        assert proximity_category(5.0) == ProximityCategory.MEDIUM
        assert proximity_category(10.0) == ProximityCategory.FAR

    def test_category_str(self):
        """Categories render as their value."""
        assert str(ProximityCategory.NEAR) == "near"

    def test_levels(self):
        assert proximity_level(-1.0) == 0
        assert proximity_level(0.3) == 1
        assert proximity_level(1.0) == 2
        assert proximity_level(3.0) == 3
        assert proximity_level(10.0) == 4
        assert proximity_level(15.0) == 5

    def test_distance_module_reexports_helpers(self):
        """The helpers stay importable from the estimator module."""
        assert distance.proximity_category is proximity_category
        assert distance.signal_percent is signal_percent
        assert distance.ProximityCategory is ProximityCategory

    def test_device_serialization_with_unknown_distance(self):
        """TrackedDevice renders proximity fields for the unknown sentinel."""
        device = TrackedDevice(
            identity="AA:BB:CC:DD:EE:FF",
            device_class=DeviceClass.BLUETOOTH,
            rssi=0,
            avg_rssi=0.0,
            distance=UNKNOWN_DISTANCE,
            first_seen=0,
            last_seen=0,
        )
        data = device.to_dict()

        assert data['distance_m'] is None
        assert data['proximity'] == "unknown"
        assert data['proximity_level'] == 0
        assert data['signal_bars'] == 5


class TestPathLossCalibration:
    """Tests for path-loss exponent estimation."""

    def test_two_point_free_space(self):
        """20 dB drop over one decade is an exponent of 2."""
        assert estimate_path_loss_exponent(1.0, -59, 10.0, -79) == pytest.approx(2.0)

    def test_two_point_clamped(self):
        """Estimates are clamped to [1.5, 5.0]."""
        assert estimate_path_loss_exponent(1.0, -59, 10.0, -119) == 5.0
        assert estimate_path_loss_exponent(1.0, -59, 10.0, -60) == 1.5

    @pytest.mark.parametrize("d1,d2", [(0.0, 5.0), (2.0, -1.0), (3.0, 3.0)])
    def test_two_point_degenerate(self, d1, d2):
        """Unusable distance pairs fall back to free space."""
        assert estimate_path_loss_exponent(d1, -50, d2, -70) == 2.0

    def test_fit_recovers_parameters(self):
        """Least-squares fit recovers tx_power and exponent from clean data."""
        samples = [(1.0, -59), (10.0, -84), (100.0, -109)]
        tx_power, exponent = fit_path_loss(samples)
        assert tx_power == pytest.approx(-59.0)
        assert exponent == pytest.approx(2.5)

    def test_fit_requires_two_distances(self):
        """A single distinct distance cannot determine a slope."""
        with pytest.raises(ValueError):
            fit_path_loss([(2.0, -60), (2.0, -62)])
        with pytest.raises(ValueError):
            fit_path_loss([])
