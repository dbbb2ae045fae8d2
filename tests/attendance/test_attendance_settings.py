from src.staff_ledger.staff_ledger.attendance.settings import AttendanceSettings, AttendanceSettingsProvider


async def test_defaults_apply_when_nothing_is_stored(container, business):
    settings = await container.attendance_settings.get_for(business.business_id)

    assert settings.late_threshold_minutes == 15
    assert settings.overtime_threshold_minutes == 30
    assert settings.allow_wfh is True


async def test_stored_settings_override_defaults(container, business):
    await container.attendance_settings.save(
        AttendanceSettings(
            business_id=business.business_id,
            late_threshold_minutes=5,
            overtime_threshold_minutes=45,
            geo_fencing_enabled=True,
            geo_fence_radius=250,
        )
    )
    await container.attendance_settings.save(
        AttendanceSettings(business_id=business.business_id, late_threshold_minutes=7, geo_fencing_enabled=True)
    )

    settings = await container.attendance_settings.get_for(business.business_id)
    assert settings.late_threshold_minutes == 7
    assert settings.overtime_threshold_minutes == 30
    assert settings.geo_fencing_enabled is True


async def test_provider_without_store_uses_configured_defaults():
    provider = AttendanceSettingsProvider(default_late_threshold_minutes=20, default_overtime_threshold_minutes=60)

    settings = await provider.get_for("biz_1")
    assert (settings.late_threshold_minutes, settings.overtime_threshold_minutes) == (20, 60)
