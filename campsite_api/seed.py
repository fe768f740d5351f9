"""Seed reference data: the 77 Thai provinces, campsite types and amenities."""
from sqlalchemy.orm import Session
from campsite_api.models.province import Province, Region
from campsite_api.models.campsite import CampsiteType, Amenity

PROVINCES = [
    # (name_th, name_en, slug, latitude, longitude, region)
    ("กรุงเทพมหานคร", "Bangkok", "bangkok", 13.7563, 100.5018, Region.central),
    ("กำแพงเพชร", "Kamphaeng Phet", "kamphaeng-phet", 16.4827, 99.5226, Region.central),
    ("ชัยนาท", "Chai Nat", "chai-nat", 15.1851, 100.1251, Region.central),
    ("นครนายก", "Nakhon Nayok", "nakhon-nayok", 14.2069, 101.2131, Region.central),
    ("นครปฐม", "Nakhon Pathom", "nakhon-pathom", 13.8196, 100.0443, Region.central),
    ("นครสวรรค์", "Nakhon Sawan", "nakhon-sawan", 15.7030, 100.1371, Region.central),
    ("นนทบุรี", "Nonthaburi", "nonthaburi", 13.8621, 100.5144, Region.central),
    ("ปทุมธานี", "Pathum Thani", "pathum-thani", 14.0208, 100.5250, Region.central),
    ("พระนครศรีอยุธยา", "Phra Nakhon Si Ayutthaya", "ayutthaya", 14.3532, 100.5684, Region.central),
    ("พิจิตร", "Phichit", "phichit", 16.4380, 100.3480, Region.central),
    ("พิษณุโลก", "Phitsanulok", "phitsanulok", 16.8211, 100.2659, Region.central),
    ("เพชรบูรณ์", "Phetchabun", "phetchabun", 16.4189, 101.1591, Region.central),
    ("ลพบุรี", "Lop Buri", "lop-buri", 14.7995, 100.6534, Region.central),
    ("สมุทรปราการ", "Samut Prakan", "samut-prakan", 13.5990, 100.5998, Region.central),
    ("สมุทรสงคราม", "Samut Songkhram", "samut-songkhram", 13.4098, 100.0021, Region.central),
    ("สมุทรสาคร", "Samut Sakhon", "samut-sakhon", 13.5475, 100.2747, Region.central),
    ("สระบุรี", "Saraburi", "saraburi", 14.5289, 100.9102, Region.central),
    ("สิงห์บุรี", "Sing Buri", "sing-buri", 14.8936, 100.4024, Region.central),
    ("สุโขทัย", "Sukhothai", "sukhothai", 17.0156, 99.8230, Region.central),
    ("สุพรรณบุรี", "Suphan Buri", "suphan-buri", 14.4744, 100.1177, Region.central),
    ("อ่างทอง", "Ang Thong", "ang-thong", 14.5896, 100.4549, Region.central),
    ("อุทัยธานี", "Uthai Thani", "uthai-thani", 15.3835, 100.0245, Region.central),
    ("เชียงราย", "Chiang Rai", "chiang-rai", 19.9105, 99.8406, Region.north),
    ("เชียงใหม่", "Chiang Mai", "chiang-mai", 18.7883, 98.9853, Region.north),
    ("น่าน", "Nan", "nan", 18.7756, 100.7730, Region.north),
    ("พะเยา", "Phayao", "phayao", 19.1664, 99.9019, Region.north),
    ("แพร่", "Phrae", "phrae", 18.1445, 100.1403, Region.north),
    ("แม่ฮ่องสอน", "Mae Hong Son", "mae-hong-son", 19.3020, 97.9654, Region.north),
    ("ลำปาง", "Lampang", "lampang", 18.2888, 99.4908, Region.north),
    ("ลำพูน", "Lamphun", "lamphun", 18.5744, 99.0087, Region.north),
    ("อุตรดิตถ์", "Uttaradit", "uttaradit", 17.6200, 100.0993, Region.north),
    ("กาฬสินธุ์", "Kalasin", "kalasin", 16.4314, 103.5059, Region.northeast),
    ("ขอนแก่น", "Khon Kaen", "khon-kaen", 16.4419, 102.8360, Region.northeast),
    ("ชัยภูมิ", "Chaiyaphum", "chaiyaphum", 15.8068, 102.0316, Region.northeast),
    ("นครพนม", "Nakhon Phanom", "nakhon-phanom", 17.4048, 104.7859, Region.northeast),
    ("นครราชสีมา", "Nakhon Ratchasima", "nakhon-ratchasima", 14.9799, 102.0978, Region.northeast),
    ("บึงกาฬ", "Bueng Kan", "bueng-kan", 18.3609, 103.6466, Region.northeast),
    ("บุรีรัมย์", "Buri Ram", "buri-ram", 14.9930, 103.1029, Region.northeast),
    ("มหาสารคาม", "Maha Sarakham", "maha-sarakham", 16.1851, 103.3029, Region.northeast),
    ("มุกดาหาร", "Mukdahan", "mukdahan", 16.5424, 104.7233, Region.northeast),
    ("ยโสธร", "Yasothon", "yasothon", 15.7944, 104.1450, Region.northeast),
    ("ร้อยเอ็ด", "Roi Et", "roi-et", 16.0567, 103.6520, Region.northeast),
    ("เลย", "Loei", "loei", 17.4860, 101.7223, Region.northeast),
    ("ศรีสะเกษ", "Si Sa Ket", "si-sa-ket", 15.1186, 104.3220, Region.northeast),
    ("สกลนคร", "Sakon Nakhon", "sakon-nakhon", 17.1545, 104.1348, Region.northeast),
    ("สุรินทร์", "Surin", "surin", 14.8818, 103.4936, Region.northeast),
    ("หนองคาย", "Nong Khai", "nong-khai", 17.8783, 102.7420, Region.northeast),
    ("หนองบัวลำภู", "Nong Bua Lam Phu", "nong-bua-lam-phu", 17.2218, 102.4260, Region.northeast),
    ("อำนาจเจริญ", "Amnat Charoen", "amnat-charoen", 15.8656, 104.6258, Region.northeast),
    ("อุดรธานี", "Udon Thani", "udon-thani", 17.4156, 102.7872, Region.northeast),
    ("อุบลราชธานี", "Ubon Ratchathani", "ubon-ratchathani", 15.2287, 104.8564, Region.northeast),
    ("จันทบุรี", "Chanthaburi", "chanthaburi", 12.6114, 102.1039, Region.east),
    ("ฉะเชิงเทรา", "Chachoengsao", "chachoengsao", 13.6904, 101.0780, Region.east),
    ("ชลบุรี", "Chon Buri", "chon-buri", 13.3611, 100.9847, Region.east),
    ("ตราด", "Trat", "trat", 12.2427, 102.5158, Region.east),
    ("ปราจีนบุรี", "Prachin Buri", "prachin-buri", 14.0509, 101.3717, Region.east),
    ("ระยอง", "Rayong", "rayong", 12.6814, 101.2816, Region.east),
    ("สระแก้ว", "Sa Kaeo", "sa-kaeo", 13.8240, 102.0645, Region.east),
    ("กาญจนบุรี", "Kanchanaburi", "kanchanaburi", 14.0227, 99.5328, Region.west),
    ("ตาก", "Tak", "tak", 16.8840, 99.1259, Region.west),
    ("ประจวบคีรีขันธ์", "Prachuap Khiri Khan", "prachuap-khiri-khan", 11.8126, 99.7957, Region.west),
    ("เพชรบุรี", "Phetchaburi", "phetchaburi", 13.1119, 99.9398, Region.west),
    ("ราชบุรี", "Ratchaburi", "ratchaburi", 13.5283, 99.8134, Region.west),
    ("กระบี่", "Krabi", "krabi", 8.0863, 98.9063, Region.south),
    ("ชุมพร", "Chumphon", "chumphon", 10.4930, 99.1800, Region.south),
    ("ตรัง", "Trang", "trang", 7.5563, 99.6114, Region.south),
    ("นครศรีธรรมราช", "Nakhon Si Thammarat", "nakhon-si-thammarat", 8.4322, 99.9631, Region.south),
    ("นราธิวาส", "Narathiwat", "narathiwat", 6.4318, 101.8231, Region.south),
    ("ปัตตานี", "Pattani", "pattani", 6.8664, 101.2508, Region.south),
    ("พังงา", "Phang Nga", "phang-nga", 8.4500, 98.5256, Region.south),
    ("พัทลุง", "Phatthalung", "phatthalung", 7.6167, 100.0740, Region.south),
    ("ภูเก็ต", "Phuket", "phuket", 7.8804, 98.3923, Region.south),
    ("ยะลา", "Yala", "yala", 6.5410, 101.2803, Region.south),
    ("ระนอง", "Ranong", "ranong", 9.9528, 98.6085, Region.south),
    ("สงขลา", "Songkhla", "songkhla", 7.1897, 100.5954, Region.south),
    ("สตูล", "Satun", "satun", 6.6238, 100.0673, Region.south),
    ("สุราษฎร์ธานี", "Surat Thani", "surat-thani", 9.1382, 99.3217, Region.south),
]

CAMPSITE_TYPES = [
    # (name_th, name_en, slug, color_hex, icon, description_en, sort_order)
    ("แคมป์ปิ้ง", "Camping", "camping", "#22C55E", "tent", "Traditional tent camping, close to nature", 1),
    ("แกลมปิ้ง", "Glamping", "glamping", "#8B5CF6", "star", "Luxury camping with amenities", 2),
    ("รีสอร์ทเต็นท์", "Tented Resort", "tented-resort", "#F59E0B", "home", "Resort-style tents with full service", 3),
    ("บังกะโล", "Bungalow", "bungalow", "#3B82F6", "house", "Small houses, perfect for families", 4),
    ("กระท่อม", "Cabin", "cabin", "#EF4444", "cabin", "Wooden cabins in nature", 5),
    ("RV/คาราวาน", "RV/Caravan", "rv-caravan", "#EC4899", "caravan", "Spaces for RVs and caravans", 6),
]

AMENITIES = [
    # (name_th, name_en, slug, icon, category, sort_order)
    ("WiFi", "WiFi", "wifi", "wifi", "basic", 1),
    ("ไฟฟ้า", "Electricity", "electricity", "zap", "basic", 2),
    ("น้ำประปา", "Running Water", "running-water", "droplet", "basic", 3),
    ("ที่จอดรถ", "Parking", "parking", "car", "basic", 4),
    ("ห้องน้ำ", "Restroom", "restroom", "door-closed", "basic", 5),
    ("ห้องอาบน้ำ", "Shower", "shower", "shower-head", "basic", 6),
    ("แอร์", "Air Conditioning", "ac", "snowflake", "comfort", 10),
    ("พัดลม", "Fan", "fan", "fan", "comfort", 11),
    ("น้ำอุ่น", "Hot Water", "hot-water", "flame", "comfort", 12),
    ("ห้องน้ำส่วนตัว", "Private Bathroom", "private-bathroom", "bath", "comfort", 13),
    ("เครื่องซักผ้า", "Washing Machine", "washing-machine", "shirt", "comfort", 14),
    ("เครื่องทำน้ำแข็ง", "Ice Machine", "ice-machine", "cube", "comfort", 15),
    ("ร้านอาหาร", "Restaurant", "restaurant", "utensils", "food", 20),
    ("ห้องครัว", "Kitchen", "kitchen", "chef-hat", "food", 21),
    ("พื้นที่ BBQ", "BBQ Area", "bbq", "flame", "food", 22),
    ("ร้านกาแฟ", "Coffee Shop", "coffee-shop", "coffee", "food", 23),
    ("มินิมาร์ท", "Mini Mart", "minimart", "shopping-cart", "food", 24),
    ("สระว่ายน้ำ", "Swimming Pool", "swimming-pool", "waves", "recreation", 30),
    ("จุดชมวิว", "Viewpoint", "viewpoint", "eye", "recreation", 31),
    ("เส้นทางเดินป่า", "Hiking Trail", "hiking-trail", "mountain", "recreation", 32),
    ("ตกปลา", "Fishing", "fishing", "fish", "recreation", 33),
    ("ปั่นจักรยาน", "Cycling", "cycling", "bike", "recreation", 34),
    ("สนามเด็กเล่น", "Playground", "playground", "gamepad", "recreation", 35),
    ("กิจกรรมผจญภัย", "Adventure Activities", "adventure", "compass", "recreation", 36),
    ("บริการรับส่ง", "Shuttle Service", "shuttle", "bus", "services", 40),
    ("ทัวร์ท้องถิ่น", "Local Tours", "tours", "map", "services", 41),
    ("เช่าอุปกรณ์แคมป์", "Camping Gear Rental", "gear-rental", "backpack", "services", 42),
    ("ไกด์นำเที่ยว", "Guide Service", "guide", "user", "services", 43),
    ("First Aid", "First Aid", "first-aid", "heart-pulse", "services", 44),
    ("รปภ. 24 ชม.", "24hr Security", "security", "shield", "safety", 50),
    ("กล้องวงจรปิด", "CCTV", "cctv", "video", "safety", 51),
    ("ถังดับเพลิง", "Fire Extinguisher", "fire-extinguisher", "flame-kindling", "safety", 52),
    ("ไฟฉุกเฉิน", "Emergency Lights", "emergency-lights", "lightbulb", "safety", 53),
    ("อนุญาตสัตว์เลี้ยง", "Pet Friendly", "pet-friendly", "paw-print", "pets", 60),
    ("พื้นที่สำหรับสัตว์เลี้ยง", "Pet Area", "pet-area", "dog", "pets", 61),
]


def seed_provinces(db: Session) -> None:
    if db.query(Province).count() > 0:
        return
    for name_th, name_en, slug, lat, lng, region in PROVINCES:
        db.add(Province(name_th=name_th, name_en=name_en, slug=slug, latitude=lat, longitude=lng, region=region))
    db.commit()


def seed_campsite_types(db: Session) -> None:
    if db.query(CampsiteType).count() > 0:
        return
    for name_th, name_en, slug, color_hex, icon, description_en, sort_order in CAMPSITE_TYPES:
        db.add(
            CampsiteType(
                name_th=name_th,
                name_en=name_en,
                slug=slug,
                color_hex=color_hex,
                icon=icon,
                description_en=description_en,
                sort_order=sort_order,
            )
        )
    db.commit()


def seed_amenities(db: Session) -> None:
    if db.query(Amenity).count() > 0:
        return
    for name_th, name_en, slug, icon, category, sort_order in AMENITIES:
        db.add(Amenity(name_th=name_th, name_en=name_en, slug=slug, icon=icon, category=category, sort_order=sort_order))
    db.commit()


def seed_reference_data(db: Session) -> None:
    seed_provinces(db)
    seed_campsite_types(db)
    seed_amenities(db)
