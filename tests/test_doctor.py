from jvms_prolog.workflows import doctor


def test_doctor_report_with_writable_folder(monkeypatch, tmp_path):
    monkeypatch.setattr(doctor, "detect_java_feature_version", lambda: 21)
    monkeypatch.setenv("JVMS_DEDUP_POLICY", "global")
    report = doctor.build_doctor_report(output_folder=tmp_path)

    checks = {check["name"]: check for check in report["checks"]}
    assert report["ok"] is True
    assert checks["java"]["status"] == "ok"
    assert "21" in checks["java"]["detail"]
    assert checks["output_folder"]["status"] == "ok"
    assert checks["JVMS_DEDUP_POLICY"]["value"] == "global"


def test_doctor_flags_unwritable_folder(monkeypatch, tmp_path):
    monkeypatch.setattr(doctor, "detect_java_feature_version", lambda: None)
    report = doctor.build_doctor_report(output_folder=tmp_path / "missing" / "deeper")

    checks = {check["name"]: check for check in report["checks"]}
    assert report["ok"] is False
    assert checks["output_folder"]["status"] == "missing"
    # Missing java is informational: the range falls back to the latest known version.
    assert checks["java"]["level"] == "info"


def test_format_doctor_report_lists_checks(monkeypatch, tmp_path):
    monkeypatch.setattr(doctor, "detect_java_feature_version", lambda: None)
    text = doctor.format_doctor_report(doctor.build_doctor_report(output_folder=tmp_path))
    assert text.startswith("jvms-prolog doctor")
    assert "- [info] java: missing" in text
    assert "remedy: Install a JDK" in text
